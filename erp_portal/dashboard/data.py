"""
Placeholder datasets behind the dashboard routes.

Procurement spend is a fixed dataset. The other builders draw numbers from a
``random.Random`` seeded with the filters, so the same filters always give the
same payload.
"""
import random

MONTHS = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']

# Activity scale per reporting period
PERIOD_BASE_AMOUNT = {
    'mtd': 850000,
    'qtd': 2500000,
    'ytd': 15000000,
    'last-12-months': 18000000,
    'custom': 850000,
}

GL_ACCOUNTS = [
    ('1000', 'Cash - Operating', 'Asset'),
    ('1100', 'Accounts Receivable', 'Asset'),
    ('1200', 'Inventory', 'Asset'),
    ('2000', 'Accounts Payable', 'Liability'),
    ('2100', 'Accrued Expenses', 'Liability'),
    ('4000', 'Sales Revenue', 'Revenue'),
    ('4100', 'Service Revenue', 'Revenue'),
    ('5000', 'Software Expense', 'Expense'),
    ('5100', 'Office Supplies', 'Expense'),
    ('5200', 'Professional Services', 'Expense'),
]

BANK_ACCOUNTS = [
    ('JPMorgan Chase', 'Operating', 'operating'),
    ('Bank of America', 'Savings', 'savings'),
    ('Wells Fargo', 'Investment', 'investment'),
    ('Local Credit Union', 'Petty Cash', 'petty-cash'),
]

AGING_BUCKETS = ['current', '1-30', '31-60', '61-90', '90+']

DEFAULT_CUSTOMERS = ['Blue Ocean Shipping', 'Harbor Logistics', 'Meridian Freight', 'Pacific Tankers', 'Straits Marine']
DEFAULT_SALESPEOPLE = ['Alicia Tan', 'Marcus Lee', 'Priya Nair', 'Tom Becker']
DEFAULT_REGIONS = ['North', 'South', 'East', 'West']

PROCUREMENT_DEPARTMENTS = [
    {
        'department': 'Operations',
        'actualSpend': 3200000,
        'budget': 3000000,
        'forecast': 3500000,
        'category': 'Strategic',
        'trend': 8.2,
        'budgetHolder': 'John Smith',
        'categories': [
            {'category': 'Equipment', 'spend': 1200000, 'budget': 1000000},
            {'category': 'Materials', 'spend': 1800000, 'budget': 1600000},
            {'category': 'Services', 'spend': 200000, 'budget': 400000},
        ],
    },
    {
        'department': 'Information Technology',
        'actualSpend': 1800000,
        'budget': 2200000,
        'forecast': 1900000,
        'category': 'Strategic',
        'trend': -5.1,
        'budgetHolder': 'Sarah Johnson',
        'categories': [
            {'category': 'Software', 'spend': 800000, 'budget': 1000000},
            {'category': 'Hardware', 'spend': 600000, 'budget': 800000},
            {'category': 'Services', 'spend': 400000, 'budget': 400000},
        ],
    },
    {
        'department': 'Human Resources',
        'actualSpend': 450000,
        'budget': 500000,
        'forecast': 480000,
        'category': 'Tactical',
        'trend': -2.3,
        'budgetHolder': 'Mike Davis',
        'categories': [
            {'category': 'Training', 'spend': 200000, 'budget': 250000},
            {'category': 'Software', 'spend': 150000, 'budget': 150000},
            {'category': 'Services', 'spend': 100000, 'budget': 100000},
        ],
    },
    {
        'department': 'Finance',
        'actualSpend': 280000,
        'budget': 300000,
        'forecast': 290000,
        'category': 'Tactical',
        'trend': -1.8,
        'budgetHolder': 'Lisa Wang',
        'categories': [
            {'category': 'Software', 'spend': 120000, 'budget': 120000},
            {'category': 'Services', 'spend': 100000, 'budget': 120000},
            {'category': 'Office Supplies', 'spend': 60000, 'budget': 60000},
        ],
    },
    {
        'department': 'Procurement',
        'actualSpend': 850000,
        'budget': 800000,
        'forecast': 900000,
        'category': 'Tactical',
        'trend': 12.4,
        'budgetHolder': 'Anna Rodriguez',
        'categories': [
            {'category': 'Software', 'spend': 300000, 'budget': 250000},
            {'category': 'Services', 'spend': 350000, 'budget': 350000},
            {'category': 'Training', 'spend': 200000, 'budget': 200000},
        ],
    },
]

PROCUREMENT_MONTHLY_TREND = [
    {'month': 'Jan', 'actual': 2.8, 'budget': 2.9, 'cumulative': 2.8},
    {'month': 'Feb', 'actual': 2.9, 'budget': 2.9, 'cumulative': 5.7},
    {'month': 'Mar', 'actual': 3.1, 'budget': 2.9, 'cumulative': 8.8},
    {'month': 'Apr', 'actual': 2.7, 'budget': 2.9, 'cumulative': 11.5},
    {'month': 'May', 'actual': 3.2, 'budget': 2.9, 'cumulative': 14.7},
    {'month': 'Jun', 'actual': 3.4, 'budget': 2.9, 'cumulative': 18.1},
]


def variance_percentage(actual, budget):
    if not budget:
        return 0.0
    return round((actual - budget) / budget * 100, 1)


def procurement_spend(filters):
    """Fixed spend-versus-budget dataset, echoing the filters it was asked for"""
    departments = []
    for department in PROCUREMENT_DEPARTMENTS:
        variance = department['actualSpend'] - department['budget']
        departments.append({
            **department,
            'variance': variance,
            'variancePercentage': variance_percentage(department['actualSpend'], department['budget']),
            'categories': [
                {**category, 'variance': category['spend'] - category['budget']}
                for category in department['categories']
            ],
        })

    total_actual = sum(department['actualSpend'] for department in departments)
    total_budget = sum(department['budget'] for department in departments)

    category_analysis = []
    for category in ('Strategic', 'Tactical'):
        members = [department for department in departments if department['category'] == category]
        actual = sum(department['actualSpend'] for department in members)
        budget = sum(department['budget'] for department in members)
        category_analysis.append({
            'category': category,
            'actualSpend': actual,
            'budget': budget,
            'variance': actual - budget,
            'percentage': round(actual / total_actual * 100, 1),
            'departments': [department['department'] for department in members],
        })

    return {
        'filters': filters.applied(),
        'summary': {
            'totalActualSpend': total_actual,
            'totalBudget': total_budget,
            'totalVariance': total_actual - total_budget,
            'totalVariancePercentage': variance_percentage(total_actual, total_budget),
            'totalForecast': sum(department['forecast'] for department in departments),
        },
        'departments': departments,
        'monthlyTrend': PROCUREMENT_MONTHLY_TREND,
        'categoryAnalysis': category_analysis,
        'budgetVarianceAnalysis': {
            'overBudget': [
                {'department': d['department'], 'variance': d['variance'], 'percentage': d['variancePercentage']}
                for d in sorted(departments, key=lambda d: -d['variance']) if d['variance'] > 0
            ],
            'underBudget': [
                {'department': d['department'], 'variance': d['variance'], 'percentage': d['variancePercentage']}
                for d in sorted(departments, key=lambda d: d['variance']) if d['variance'] < 0
            ],
        },
    }


def financial_kpis(filters):
    rng = random.Random(filters.seed())
    base = PERIOD_BASE_AMOUNT[filters.period]

    gl_activity = []
    for index, (code, name, account_type) in enumerate(GL_ACCOUNTS, start=1):
        transaction_count = int(base / 20000 * rng.uniform(0.8, 1.2))
        gl_activity.append({
            'accountId': f'acc-{index}',
            'accountCode': code,
            'accountName': name,
            'accountType': account_type,
            'transactionCount': transaction_count,
            'absoluteBalanceChange': int(transaction_count * rng.uniform(500, 2500)),
            'variancePercentage': round(rng.uniform(-50, 50), 1),
        })
    gl_activity.sort(key=lambda account: account['absoluteBalanceChange'], reverse=True)

    bank_accounts = []
    for index, (bank_name, nickname, account_type) in enumerate(BANK_ACCOUNTS):
        balance = round(500000 + index * 200000 + rng.uniform(0, 300000), 2)
        bank_accounts.append({
            'accountId': f'bank-{index + 1}',
            'bankName': bank_name,
            'accountNickname': nickname,
            'accountType': account_type,
            'currentBalance': balance,
            'alertThreshold': round(balance * 0.1, 2),
            'currency': 'USD',
            'isConnected': rng.random() > 0.1,
        })

    operations = round(base * rng.uniform(0.08, 0.15), 2)
    investing = round(-base * rng.uniform(0.02, 0.06), 2)
    financing = round(base * rng.uniform(-0.03, 0.03), 2)
    beginning_cash = round(base * 0.2, 2)

    return {
        'filters': filters.applied(),
        'trialBalance': {
            'totalDebits': round(base * 1.02, 2),
            'totalCredits': round(base * 0.98, 2),
            'netChange': round(base * 0.04, 2),
            'varianceThreshold': 1000,
            'historicalData': [
                {'period': month, 'netChange': round(base * rng.uniform(-0.01, 0.05), 2)}
                for month in MONTHS
            ],
        },
        'glActivity': gl_activity,
        'bankAccounts': bank_accounts,
        'cashFlow': {
            'beginningCash': beginning_cash,
            'cashFromOperations': operations,
            'cashFromInvesting': investing,
            'cashFromFinancing': financing,
            'endingCash': round(beginning_cash + operations + investing + financing, 2),
            'period': filters.period,
        },
    }


def receivables_aging(filters):
    rng = random.Random(filters.seed())
    base = PERIOD_BASE_AMOUNT[filters.period] * 0.12
    customers = filters.customer or DEFAULT_CUSTOMERS

    rows = []
    for name in customers:
        buckets = {bucket: round(base / len(customers) * rng.uniform(0.0, 0.5) / (position + 1), 2)
                   for position, bucket in enumerate(AGING_BUCKETS)}
        rows.append({
            'customer': name,
            'buckets': buckets,
            'totalOutstanding': round(sum(buckets.values()), 2),
            'creditLimit': round(base / len(customers) * 1.5, 2),
        })
    rows.sort(key=lambda row: row['totalOutstanding'], reverse=True)

    totals = {bucket: round(sum(row['buckets'][bucket] for row in rows), 2) for bucket in AGING_BUCKETS}
    total_outstanding = round(sum(totals.values()), 2)
    overdue = round(total_outstanding - totals['current'], 2)

    return {
        'filters': filters.applied(),
        'summary': {
            'totalOutstanding': total_outstanding,
            'overdueAmount': overdue,
            'overduePercentage': round(overdue / total_outstanding * 100, 1) if total_outstanding else 0.0,
            'daysSalesOutstanding': rng.randint(28, 75),
        },
        'buckets': [{'bucket': bucket, 'amount': totals[bucket]} for bucket in AGING_BUCKETS],
        'customers': rows,
    }


def sales_performance(filters):
    rng = random.Random(filters.seed())
    base = PERIOD_BASE_AMOUNT[filters.period]
    salespeople = filters.salesperson or DEFAULT_SALESPEOPLE
    regions = filters.geography or DEFAULT_REGIONS

    by_salesperson = []
    for name in salespeople:
        target = round(base / len(salespeople), 2)
        revenue = round(target * rng.uniform(0.7, 1.25), 2)
        by_salesperson.append({
            'salesperson': name,
            'revenue': revenue,
            'target': target,
            'attainment': round(revenue / target * 100, 1),
            'deals': rng.randint(5, 60),
        })
    by_salesperson.sort(key=lambda row: row['revenue'], reverse=True)

    revenue = round(sum(row['revenue'] for row in by_salesperson), 2)
    target = round(sum(row['target'] for row in by_salesperson), 2)

    return {
        'filters': filters.applied(),
        'summary': {
            'revenue': revenue,
            'target': target,
            'attainment': round(revenue / target * 100, 1),
            'growth': round(rng.uniform(-10, 25), 1),
        },
        'bySalesperson': by_salesperson,
        'byRegion': [
            {'region': region, 'revenue': round(revenue / len(regions) * rng.uniform(0.6, 1.4), 2)}
            for region in regions
        ],
        'monthlyTrend': [
            {'month': month, 'revenue': round(revenue / 12 * rng.uniform(0.8, 1.2), 2)}
            for month in MONTHS
        ],
    }
