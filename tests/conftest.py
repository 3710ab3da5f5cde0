from __future__ import annotations

import pytest

CURRENCIES_XML = """<?xml version="1.0" encoding="windows-1251"?>
<Valuta name="Foreign Currency Market Lib">
<Item ID="R01010">
<Name>Австралийский доллар</Name>
<EngName>Australian Dollar</EngName>
<Nominal>1</Nominal>
<ParentCode>R01010    </ParentCode>
<ISO_Num_Code>36</ISO_Num_Code>
<ISO_Char_Code>AUD</ISO_Char_Code>
</Item>
<Item ID="R01015">
<Name>Австрийский шиллинг</Name>
<EngName>Austrian Shilling</EngName>
<Nominal>1000</Nominal>
<ParentCode>R01015    </ParentCode>
<ISO_Num_Code>40</ISO_Num_Code>
<ISO_Char_Code>ATS</ISO_Char_Code>
</Item>
<Item ID="R01436">
<Name>Литовский талон</Name>
<EngName>Lithuanian talon</EngName>
<Nominal>1</Nominal>
<ParentCode>R01435    </ParentCode>
<ISO_Num_Code></ISO_Num_Code>
<ISO_Char_Code></ISO_Char_Code>
</Item>
</Valuta>
"""

RATES_XML = """<?xml version="1.0" encoding="windows-1251" ?>\
<ValCurs Date="22.08.2015" name="Foreign Currency Market">\
<Valute ID="R01010"><NumCode>036</NumCode><CharCode>AUD</CharCode>\
<Nominal>1</Nominal><Name>Австралийский доллар</Name><Value>49,9059</Value></Valute>\
<Valute ID="R01035"><NumCode>826</NumCode><CharCode>GBP</CharCode>\
<Nominal>1</Nominal><Name>Фунт стерлингов Соединенного королевства</Name><Value>106,6814</Value></Valute>\
<Valute ID="R01820"><NumCode>392</NumCode><CharCode>JPY</CharCode>\
<Nominal>100</Nominal><Name>Японских иен</Name><Value>55,0285</Value></Valute>\
</ValCurs>"""


class StaticTransport:
    """Transport double that returns a canned body and records requested URLs."""

    def __init__(self, body: bytes) -> None:
        self.body = body
        self.urls: list[str] = []
        self.closed = False

    def get(self, url, context):
        self.urls.append(url)
        return self.body

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def currencies_body() -> bytes:
    return CURRENCIES_XML.encode("cp1251")


@pytest.fixture
def rates_body() -> bytes:
    return RATES_XML.encode("cp1251")


@pytest.fixture
def currencies_transport(currencies_body: bytes) -> StaticTransport:
    return StaticTransport(currencies_body)


@pytest.fixture
def rates_transport(rates_body: bytes) -> StaticTransport:
    return StaticTransport(rates_body)
