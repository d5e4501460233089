"""Country pools for the flag and map tasks."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Country:
    code: str
    name: str
    tier: int


@dataclass(frozen=True)
class CountryShape:
    name: str
    path: str
    tier: int
    view_box: str = "0 0 100 100"


COUNTRIES: tuple[Country, ...] = (
    Country("DE", "Germany", 1),
    Country("FR", "France", 1),
    Country("US", "USA", 1),
    Country("GB", "United Kingdom", 1),
    Country("IT", "Italy", 1),
    Country("ES", "Spain", 1),
    Country("JP", "Japan", 1),
    Country("CA", "Canada", 1),
    Country("CH", "Switzerland", 1),
    Country("TR", "Turkey", 1),
    Country("BR", "Brazil", 2),
    Country("CN", "China", 2),
    Country("RU", "Russia", 2),
    Country("IN", "India", 2),
    Country("AU", "Australia", 2),
    Country("KR", "South Korea", 2),
    Country("SE", "Sweden", 2),
    Country("NL", "Netherlands", 2),
    Country("PL", "Poland", 2),
    Country("GR", "Greece", 2),
    Country("AT", "Austria", 2),
    Country("PT", "Portugal", 2),
    Country("AR", "Argentina", 2),
    Country("MX", "Mexico", 2),
    Country("ZA", "South Africa", 2),
    Country("BE", "Belgium", 3),
    Country("NO", "Norway", 3),
    Country("FI", "Finland", 3),
    Country("DK", "Denmark", 3),
    Country("EG", "Egypt", 3),
    Country("TH", "Thailand", 3),
    Country("VN", "Vietnam", 3),
    Country("ID", "Indonesia", 3),
    Country("UA", "Ukraine", 3),
    Country("HU", "Hungary", 3),
    Country("CZ", "Czechia", 3),
    Country("HR", "Croatia", 3),
    Country("IL", "Israel", 3),
    Country("IS", "Iceland", 4),
    Country("EE", "Estonia", 4),
    Country("LV", "Latvia", 4),
    Country("LT", "Lithuania", 4),
    Country("SI", "Slovenia", 4),
    Country("MN", "Mongolia", 4),
    Country("KZ", "Kazakhstan", 4),
    Country("PE", "Peru", 4),
)

# Rough outlines, normalised to a 100x100 view box.
COUNTRY_SHAPES: tuple[CountryShape, ...] = (
    CountryShape("Germany", "M42,18 L56,21 L66,31 L61,44 L70,56 L81,52 L84,61 L74,79 L59,86 L41,81 L31,66 L26,46 L36,31 Z", 1),
    CountryShape("France", "M31,19 L59,16 L74,31 L71,59 L61,74 L41,81 L21,61 L16,41 Z", 1),
    CountryShape("Italy", "M31,11 L59,11 L64,29 L51,41 L61,56 L74,79 L56,89 L41,61 L36,41 Z", 1),
    CountryShape("USA", "M11,21 L41,23 L89,21 L94,49 L84,74 L61,79 L41,79 L21,69 L6,49 Z", 1),
    CountryShape("Australia", "M21,31 L49,26 L79,21 L89,41 L84,69 L61,84 L31,79 L16,61 Z", 1),
    CountryShape("Japan", "M71,11 L79,21 L74,34 L61,49 L51,64 L41,59 L51,46 L61,26 Z", 2),
    CountryShape("India", "M31,21 L49,16 L69,21 L74,39 L61,69 L51,89 L41,69 L26,41 Z", 2),
    CountryShape("Brazil", "M31,21 L69,21 L89,41 L79,69 L51,84 L41,61 L21,41 Z", 2),
    CountryShape("United Kingdom", "M41,11 L59,16 L56,39 L64,49 L74,61 L41,79 L31,61 L36,41 L26,21 Z", 2),
    CountryShape("China", "M21,31 L49,21 L79,26 L89,44 L69,69 L51,64 L31,59 L26,49 Z", 2),
)


def flag_emoji(country_code: str) -> str:
    """Regional-indicator flag for an ISO 3166 alpha-2 code."""
    return "".join(chr(127397 + ord(char)) for char in country_code.upper())
