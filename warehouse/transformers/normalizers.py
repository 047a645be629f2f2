"""
Field normalizers: trimming, coded value mapping and compact date parsing.

Nothing in this module raises on unexpected input. Unmapped codes fall
back to the mapping's default label and unreadable dates become None.
"""

from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional

from models.base import Gender, MaritalStatus, ProductLine, UNKNOWN_LABEL


def clean_string(value: Any) -> Optional[str]:
    """Trim leading/trailing whitespace; non-strings pass through untouched"""
    if isinstance(value, str):
        return value.strip()
    return value


class CodeMapping:
    """
    Maps raw coded values to canonical labels.

    Codes are compared after trimming and case folding. Null, blank and
    unrecognized input all resolve to ``default``, unless ``passthrough`` is
    set, in which case unrecognized non-blank input is kept (trimmed).
    """

    def __init__(self, codes: Mapping[str, Any], default: Any = UNKNOWN_LABEL, passthrough: bool = False):
        self.codes = {code.strip().upper(): label for code, label in codes.items()}
        self.default = default
        self.passthrough = passthrough

    def __call__(self, value: Any) -> Any:
        if value is None:
            return self.default
        text = str(value).strip()
        if not text:
            return self.default
        label = self.codes.get(text.upper())
        if label is not None:
            return label
        return text if self.passthrough else self.default

    def __repr__(self) -> str:
        return f"CodeMapping(codes={sorted(self.codes)}, default={self.default!r})"


# ============================================================================
# Mapping rules per coded field
# ============================================================================

MARITAL_STATUS_CODES = CodeMapping(
    {"S": MaritalStatus.SINGLE, "M": MaritalStatus.MARRIED},
    default=MaritalStatus.UNKNOWN,
)

CRM_GENDER_CODES = CodeMapping(
    {"F": Gender.FEMALE, "M": Gender.MALE},
    default=Gender.UNKNOWN,
)

# The ERP spells genders out as often as it abbreviates them
ERP_GENDER_CODES = CodeMapping(
    {"F": Gender.FEMALE, "FEMALE": Gender.FEMALE, "M": Gender.MALE, "MALE": Gender.MALE},
    default=Gender.UNKNOWN,
)

PRODUCT_LINE_CODES = CodeMapping(
    {
        "M": ProductLine.MOUNTAIN,
        "R": ProductLine.ROAD,
        "S": ProductLine.OTHER_SALES,
        "T": ProductLine.TOURING,
    },
    default=ProductLine.UNKNOWN,
)

COUNTRY_CODES = CodeMapping(
    {"DE": "Germany", "US": "United States", "USA": "United States"},
    default=UNKNOWN_LABEL,
    passthrough=True,
)


def map_code(value: Any, mapping: CodeMapping) -> Any:
    return mapping(value)


def normalize(record: Mapping[str, Any], rules: Mapping[str, CodeMapping]) -> Dict[str, Any]:
    """
    Produce a normalized copy of ``record``.

    Every string field is trimmed, then each field named in ``rules`` is
    replaced by its canonical label. Fields missing from the record are
    mapped from None, so a ruled field is always present in the output.
    """
    normalized = {field: clean_string(value) for field, value in record.items()}
    for field, mapping in rules.items():
        normalized[field] = mapping(normalized.get(field))
    return normalized


def parse_compact_date(value: Any) -> Optional[date]:
    """
    Parse a ``yyyymmdd`` integer.

    Zero, null, anything that is not exactly eight characters long, and
    eight digits that do not form a calendar date all give None.
    """
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    if text in ("", "0") or len(text) != 8:
        return None
    try:
        return datetime.strptime(text, "%Y%m%d").date()
    except ValueError:
        return None
