"""Keyword and pattern tables for component identification.

All tables are read-only module constants, compiled once at import.
"""

import re

RESISTOR = "resistor"
CAPACITOR = "capacitor"
DIODE = "diode"
TRANSISTOR = "transistor"
INTEGRATED_CIRCUIT = "integrated_circuit"
CONNECTOR = "connector"
INDUCTOR = "inductor"

# Order matters! Classification walks this table top to bottom and ties keep this order.
# Matching is a plain substring test on the lowercased label, so "ic" also hits "electronic".
TYPE_KEYWORDS: dict[str, tuple[str, ...]] = {
    RESISTOR: ("resistor", "resistance", "band", "cylinder", "electronic component"),
    CAPACITOR: ("capacitor", "electrolytic", "ceramic"),
    DIODE: ("diode", "led", "semiconductor"),
    TRANSISTOR: ("transistor", "mosfet", "bjt"),
    INTEGRATED_CIRCUIT: ("chip", "ic", "microchip", "processor", "circuit board"),
    CONNECTOR: ("connector", "pin", "header", "socket"),
    INDUCTOR: ("inductor", "coil"),
}

# Resistor band colors, digit order (black=0 ... white=9)
RESISTOR_COLORS: tuple[str, ...] = (
    "black", "brown", "red", "orange", "yellow",
    "green", "blue", "violet", "grey", "white",
)
COLOR_BAND_MIN_LABELS = 2
COLOR_BAND_NOTE = "Resistor identified with visible color bands"

# Numbers start at a digit-run boundary and take one optional decimal part,
# so a long digit run with no unit fails in linear time.

# Resistance: 100Ω, 4.7kΩ, 10K ohm, 220R
# Note: [kKmM] + IGNORECASE means "m" reads as either milli or mega. Left as is.
RESISTANCE_PATTERN = re.compile(r'(?<!\d)(\d+(?:\.\d*)?)\s*([kKmM]?)(Ω|ohm|R)', re.IGNORECASE)

# Capacitance: 10uF, 100nF, 4.7µF (micro sign) or 4.7μF (greek mu), 1F
CAPACITANCE_PATTERN = re.compile(r'(?<!\d)(\d+(?:\.\d*)?)\s*([µuμpnm]?F)', re.IGNORECASE)

# Voltage: 16V, 25 v
VOLTAGE_PATTERN = re.compile(r'(?<!\d)(\d+)\s*V', re.IGNORECASE)

# Whole-line part number: LM358, NE555P, 74HC595
PART_NUMBER_PATTERN = re.compile(r'[A-Z0-9]{4,12}', re.IGNORECASE)

# Common IC family prefixes, compared against the first two characters of a line
MANUFACTURER_PREFIXES: tuple[str, ...] = ("74", "CD", "LM", "TL", "NE", "MC", "SN", "AD", "MAX")
