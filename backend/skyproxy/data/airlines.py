"""Carrier code → display name for providers that only return IATA codes."""

AIRLINE_NAMES: dict[str, str] = {
    "AC": "Air Canada", "WS": "WestJet", "AA": "American Airlines",
    "DL": "Delta Air Lines", "UA": "United Airlines", "B6": "JetBlue Airways",
    "BA": "British Airways", "VS": "Virgin Atlantic", "U2": "easyJet",
    "FR": "Ryanair", "W6": "Wizz Air", "LS": "Jet2",
    "LH": "Lufthansa", "AF": "Air France", "KL": "KLM",
    "LX": "Swiss", "OS": "Austrian", "SN": "Brussels Airlines",
    "IB": "Iberia", "VY": "Vueling", "TP": "TAP Air Portugal",
    "AZ": "ITA Airways", "EI": "Aer Lingus", "FI": "Icelandair",
    "AY": "Finnair", "SK": "SAS", "LO": "LOT Polish Airlines",
    "TK": "Turkish Airlines", "EK": "Emirates", "QR": "Qatar Airways",
    "EY": "Etihad Airways", "SQ": "Singapore Airlines", "CX": "Cathay Pacific",
    "NH": "ANA", "JL": "Japan Airlines", "QF": "Qantas",
}


def airline_name(code: str | None) -> str:
    if not code or not isinstance(code, str):
        return "Unknown"
    return AIRLINE_NAMES.get(code, code)
