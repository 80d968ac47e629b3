from spendwise.visualization import create_category_pie_chart, create_daily_spend_chart


def test_empty_inputs_give_placeholder_figures():
    assert create_category_pie_chart({}).layout.title.text == 'No data to display'
    assert create_category_pie_chart({'Food': 0.0}).layout.title.text == 'No data to display'
    assert create_daily_spend_chart([]).layout.title.text == 'No data to display'


def test_category_pie_chart():
    fig = create_category_pie_chart({'Food': 200.0, 'Bills': 300.0})
    trace = fig.data[0]
    assert trace.type == 'pie'
    assert list(trace.labels) == ['Food', 'Bills']
    assert list(trace.values) == [200.0, 300.0]


def test_daily_spend_chart_has_one_point_per_day():
    daily = [0.0] * 31
    daily[4] = 200.0
    fig = create_daily_spend_chart(daily, '2024-03')
    trace = fig.data[0]
    assert trace.type == 'scatter'
    assert 'lines' in trace.mode and 'markers' in trace.mode
    assert list(trace.x) == list(range(1, 32))
    assert trace.y[4] == 200.0
    assert fig.layout.title.text == 'Daily spending, 2024-03'
