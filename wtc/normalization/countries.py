from typing import Optional, Sequence, Tuple

# Scanned in order, first prefix wins. A country that is a prefix of another
# country must be listed after it.
COUNTRIES: Tuple[str, ...] = (
    "Australia",
    "Austria",
    "Belgium",
    "Canada",
    "China",
    "Czech Republic",
    "Denmark",
    "England",
    "Finland",
    "France",
    "Germany",
    "Greece",
    "Hungary",
    "Ireland",
    "Italy",
    "Latvia",
    "Middle East",
    "Netherlands",
    "Northern Ireland",
    "Norway",
    "Poland",
    "Portugal",
    "Russia",
    "Scotland",
    "Slovenia",
    "Spain",
    "Sweden",
    "Switzerland",
    "UAE",
    "USA",
    "Wales",
)


def split_team_label(
    label: str, countries: Sequence[str] = COUNTRIES
) -> Optional[Tuple[str, str]]:
    """Splits "USA Team Eagles" into ("USA", "Team Eagles").

    Returns None when no known country prefixes the label.
    """
    for country in countries:
        if label.startswith(country):
            return country, label[len(country):].strip()
    return None
