"""
Region Statistics Normalization.

Turns heterogeneous region payloads into canonical RegionStat lists.
Pure functions with no I/O.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


MAX_REGIONS = 200


# Russian federal subject codes.
REGION_LABELS: Dict[str, str] = {
    "01": "Республика Адыгея",
    "02": "Республика Башкортостан",
    "03": "Республика Бурятия",
    "04": "Республика Алтай",
    "05": "Республика Дагестан",
    "06": "Республика Ингушетия",
    "07": "Кабардино-Балкарская Республика",
    "08": "Республика Калмыкия",
    "09": "Карачаево-Черкесская Республика",
    "10": "Республика Карелия",
    "11": "Республика Коми",
    "12": "Республика Марий Эл",
    "13": "Республика Мордовия",
    "14": "Республика Саха (Якутия)",
    "15": "Республика Северная Осетия - Алания",
    "16": "Республика Татарстан",
    "17": "Республика Тыва",
    "18": "Удмуртская Республика",
    "19": "Республика Хакасия",
    "20": "Чеченская Республика",
    "21": "Чувашская Республика",
    "22": "Алтайский край",
    "23": "Краснодарский край",
    "24": "Красноярский край",
    "25": "Приморский край",
    "26": "Ставропольский край",
    "27": "Хабаровский край",
    "28": "Амурская область",
    "29": "Архангельская область",
    "30": "Астраханская область",
    "31": "Белгородская область",
    "32": "Брянская область",
    "33": "Владимирская область",
    "34": "Волгоградская область",
    "35": "Вологодская область",
    "36": "Воронежская область",
    "37": "Ивановская область",
    "38": "Иркутская область",
    "39": "Калининградская область",
    "40": "Калужская область",
    "41": "Камчатский край",
    "42": "Кемеровская область",
    "43": "Кировская область",
    "44": "Костромская область",
    "45": "Курганская область",
    "46": "Курская область",
    "47": "Ленинградская область",
    "48": "Липецкая область",
    "49": "Магаданская область",
    "50": "Московская область",
    "51": "Мурманская область",
    "52": "Нижегородская область",
    "53": "Новгородская область",
    "54": "Новосибирская область",
    "55": "Омская область",
    "56": "Оренбургская область",
    "57": "Орловская область",
    "58": "Пензенская область",
    "59": "Пермский край",
    "60": "Псковская область",
    "61": "Ростовская область",
    "62": "Рязанская область",
    "63": "Самарская область",
    "64": "Саратовская область",
    "65": "Сахалинская область",
    "66": "Свердловская область",
    "67": "Смоленская область",
    "68": "Тамбовская область",
    "69": "Тверская область",
    "70": "Томская область",
    "71": "Тульская область",
    "72": "Тюменская область",
    "73": "Ульяновская область",
    "74": "Челябинская область",
    "75": "Забайкальский край",
    "76": "Ярославская область",
    "77": "Москва",
    "78": "Санкт-Петербург",
    "79": "Еврейская автономная область",
    "83": "Ненецкий автономный округ",
    "86": "Ханты-Мансийский автономный округ - Югра",
    "87": "Чукотский автономный округ",
    "89": "Ямало-Ненецкий автономный округ",
    "91": "Республика Крым",
    "92": "Севастополь",
}


class RegionSource(str, Enum):
    """Which resolution stage answered."""
    UPSTREAM = "upstream"
    MONGO = "mongo"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class RegionStat:
    """Number of users registered in one region."""
    region_code: str
    label: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase shape the map widget expects."""
        return {
            "regionCode": self.region_code,
            "label": self.label,
            "count": self.count,
        }


@dataclass(frozen=True)
class RegionStatsResult:
    """Resolved region statistics and the stage they came from."""
    regions: Tuple[RegionStat, ...]
    source: RegionSource

    def to_dict(self) -> Dict[str, Any]:
        return {
            "regions": [region.to_dict() for region in self.regions],
            "source": self.source.value,
        }


FALLBACK_REGIONS: Tuple[RegionStat, ...] = (
    RegionStat(region_code="38", label=REGION_LABELS["38"], count=1),
)


def get_region_label(region_code: str) -> Optional[str]:
    """Look up the human-readable name for a two-digit region code."""
    return REGION_LABELS.get(region_code)


def to_region_code(value: Any) -> Optional[str]:
    """
    Coerce a raw region code to a zero-padded two-character string.

    Accepts strings and numbers. Returns None for anything else
    or for blank input.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, (str, int, float)):
        return None
    raw = str(value).strip()
    if not raw:
        return None
    return raw.rjust(2, "0")


def to_positive_int(value: Any) -> Optional[int]:
    """
    Coerce a count to a positive integer.

    Numbers and numeric strings are floored. Non-finite values and
    anything below 1 after flooring are rejected with None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            value = float(value)
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    count = math.floor(value)
    return count if count >= 1 else None


def parse_region_array(items: Any, limit: int = MAX_REGIONS) -> List[RegionStat]:
    """
    Normalize a list of ``{regionCode|code, count|users}`` records.

    Records without a known label are dropped and the result is
    truncated to ``limit`` entries.
    """
    if not isinstance(items, list):
        return []

    regions: List[RegionStat] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        raw_code = item.get("regionCode")
        if raw_code is None:
            raw_code = item.get("code")
        region_code = to_region_code(raw_code)
        if not region_code:
            continue

        count = to_positive_int(item.get("count"))
        if count is None:
            count = to_positive_int(item.get("users"))
        if count is None:
            count = 1

        label = get_region_label(region_code)
        if not label:
            continue
        regions.append(RegionStat(region_code=region_code, label=label, count=count))

    return regions[:limit]


def aggregate_users_by_region(users: Any, limit: int = MAX_REGIONS) -> List[RegionStat]:
    """Count raw user records per region code, in first-seen order."""
    if not isinstance(users, list):
        return []

    counts: Dict[str, int] = {}
    for user in users:
        if not isinstance(user, dict):
            continue
        region_code = to_region_code(user.get("regionCode"))
        if not region_code:
            continue
        counts[region_code] = counts.get(region_code, 0) + 1

    regions: List[RegionStat] = []
    for region_code, count in counts.items():
        label = get_region_label(region_code)
        if label:
            regions.append(RegionStat(region_code=region_code, label=label, count=count))
    return regions[:limit]


def parse_upstream_payload(payload: Any, limit: int = MAX_REGIONS) -> List[RegionStat]:
    """
    Normalize an upstream payload of any supported shape.

    Tried in order: ``{"regions": [...]}``, ``{"users": [...]}``,
    then a bare list of region records. The first non-empty wins.
    """
    if isinstance(payload, dict):
        from_regions = parse_region_array(payload.get("regions"), limit)
        if from_regions:
            return from_regions

        from_users = aggregate_users_by_region(payload.get("users"), limit)
        if from_users:
            return from_users

    return parse_region_array(payload, limit)

