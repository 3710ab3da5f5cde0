from datetime import date

from fx_cbr import CbrClient, CancelledError, FetchContext

print(CbrClient.__version__)  # 0.1.0

client = CbrClient()

# Full currency catalog
with FetchContext(timeout=10) as ctx:
    currencies = client.get_currencies(ctx)
print(currencies[:1])
# => [Currency(id='R01010', name='Австралийский доллар', eng_name='Australian Dollar', nominal=1, ...)]

# Latest daily report
report = client.get_rates_report()
print(report.date, report.rates[:1])

# Report for a specific date
with FetchContext(timeout=10) as ctx:
    report = client.get_rates_report(ctx, rate_date=date(2015, 8, 22))
print(report.rates[:1])
# => (Rate(id='R01010', num_code=36, char_code='AUD', nominal=1, name='Австралийский доллар', value=49.9059),)

# A cancelled context never reaches the network
ctx = FetchContext()
ctx.cancel()
try:
    client.get_currencies(ctx)
except CancelledError:
    print("cancelled")

client.close()
