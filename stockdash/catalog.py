"""Static stock universe used for search, lookups and fallbacks.

The catalog is immutable and handed explicitly to whatever needs it, so
tests can swap in their own universe.
"""

from collections.abc import Iterable, Iterator

from stockdash.market.schemas import Company


class StockCatalog:
    __slots__ = ("_companies", "_by_symbol")

    def __init__(self, companies: Iterable[Company]) -> None:
        ordered = tuple(companies)
        by_symbol: dict[str, Company] = {}
        for company in ordered:
            if company.symbol in by_symbol:
                raise ValueError(f"Duplicate symbol in catalog: {company.symbol}")
            by_symbol[company.symbol] = company
        self._companies = ordered
        self._by_symbol = by_symbol

    @property
    def companies(self) -> tuple[Company, ...]:
        return self._companies

    @property
    def symbols(self) -> tuple[str, ...]:
        return tuple(c.symbol for c in self._companies)

    def get(self, symbol: str) -> Company | None:
        return self._by_symbol.get(symbol.upper().strip())

    def search(self, query: str) -> list[Company]:
        """Case-insensitive substring match on name or symbol; empty query matches all."""
        if not query:
            return list(self._companies)
        needle = query.lower()
        return [
            c for c in self._companies
            if needle in c.name.lower() or needle in c.symbol.lower()
        ]

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and symbol.upper().strip() in self._by_symbol

    def __iter__(self) -> Iterator[Company]:
        return iter(self._companies)

    def __len__(self) -> int:
        return len(self._companies)


DEFAULT_CATALOG = StockCatalog([
    Company(
        id="1",
        symbol="AAPL",
        name="Apple Inc.",
        sector="Technology",
        description="Designs consumer electronics, software and online services.",
        market_cap="2.8T",
        pe_ratio=29.5,
        revenue="383B",
    ),
    Company(
        id="2",
        symbol="MSFT",
        name="Microsoft Corporation",
        sector="Technology",
        description="Develops software, cloud computing services and devices.",
        market_cap="3.1T",
        pe_ratio=35.2,
        revenue="236B",
    ),
    Company(
        id="3",
        symbol="GOOGL",
        name="Alphabet Inc.",
        sector="Communication Services",
        description="Parent company of Google, focused on search, advertising and cloud.",
        market_cap="2.1T",
        pe_ratio=25.1,
        revenue="307B",
    ),
    Company(
        id="4",
        symbol="AMZN",
        name="Amazon.com, Inc.",
        sector="Consumer Discretionary",
        description="E-commerce, cloud computing, digital streaming and AI.",
        market_cap="1.9T",
        pe_ratio=50.3,
        revenue="575B",
    ),
    Company(
        id="5",
        symbol="TSLA",
        name="Tesla, Inc.",
        sector="Consumer Discretionary",
        description="Electric vehicles, energy storage and solar products.",
        market_cap="580B",
        pe_ratio=45.8,
        revenue="97B",
    ),
    Company(
        id="6",
        symbol="NVDA",
        name="NVIDIA Corporation",
        sector="Technology",
        description="Graphics processors and accelerated computing platforms.",
        market_cap="2.9T",
        revenue="61B",
    ),
    Company(
        id="7",
        symbol="META",
        name="Meta Platforms, Inc.",
        sector="Communication Services",
        description="Social media, messaging and virtual reality products.",
        market_cap="1.2T",
        pe_ratio=27.4,
        revenue="135B",
    ),
    Company(
        id="8",
        symbol="JPM",
        name="JPMorgan Chase & Co.",
        sector="Financials",
        description="Global investment banking and financial services.",
        market_cap="570B",
        pe_ratio=12.1,
        revenue="158B",
    ),
    Company(
        id="9",
        symbol="JNJ",
        name="Johnson & Johnson",
        sector="Health Care",
        description="Pharmaceuticals and medical technology.",
        market_cap="380B",
        revenue="85B",
    ),
    Company(
        id="10",
        symbol="XOM",
        name="Exxon Mobil Corporation",
        sector="Energy",
        description="Integrated oil and gas exploration, production and refining.",
        market_cap="470B",
        pe_ratio=13.6,
        revenue="344B",
    ),
])
