"""Overtime pay calculator.

Command grammar::

    加班費試算 時薪=183 平日=3 休息日=2 國定假日=0 [rate1=1.34 ...]

Weekday overtime is tiered: the first 2 hours at ``weekday_rate1`` and
every hour after that at ``weekday_rate2``.  Hours beyond 4 are not a
separate band; they stay at ``weekday_rate2`` and the reply carries a
warning that the daily cap was exceeded.  Rest-day and national-holiday
hours are billed in full at their own flat multiplier.

All arithmetic stays in float.  Rounding to whole NT dollars happens only
when a figure is displayed.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field

from laborbot.text import to_halfwidth_digits

COMMAND_KEYWORDS: tuple[str, ...] = ("加班費試算", "加班費計算", "加班試算", "/calc", "calc")

TIER1_HOURS = 2.0
TIER2_LIMIT_HOURS = 4.0

_WAGE = "hourly_wage"
_WEEKDAY = "weekday_hours"
_REST = "rest_day_hours"
_HOLIDAY = "holiday_hours"
_RATE1 = "weekday_rate1"
_RATE2 = "weekday_rate2"
_REST_RATE = "rest_rate"
_HOLIDAY_RATE = "holiday_rate"

_RATE_FIELDS = frozenset({_RATE1, _RATE2, _REST_RATE, _HOLIDAY_RATE})

KEY_ALIASES: dict[str, str] = {
    **dict.fromkeys(("時薪", "wage", "hourly-wage", "hourly_wage", "hour", "hourly"), _WAGE),
    **dict.fromkeys(("平日", "平日加班", "weekday", "weekday-hours", "ot"), _WEEKDAY),
    **dict.fromkeys(("休息日", "rest", "restday", "rest-day", "rest-hours"), _REST),
    **dict.fromkeys(("國定假日", "假日", "holiday", "holiday-hours"), _HOLIDAY),
    **dict.fromkeys(("rate1", "倍率1", "weekday-rate1"), _RATE1),
    **dict.fromkeys(("rate2", "倍率2", "weekday-rate2"), _RATE2),
    **dict.fromkeys(("rest-rate", "restrate", "休息日倍率"), _REST_RATE),
    **dict.fromkeys(("holiday-rate", "holidayrate", "假日倍率"), _HOLIDAY_RATE),
}

_TOKEN_RE = re.compile(r"^(?P<key>[^=＝:：]+)[=＝:：](?P<value>.*)$")
_NUMERIC_CHARS_RE = re.compile(r"[^0-9.]")


@dataclass
class OvertimePayParams:
    hourly_wage: float | None = None
    weekday_hours: float = 0.0
    rest_day_hours: float = 0.0
    holiday_hours: float = 0.0
    weekday_rate1: float = 1.33
    weekday_rate2: float = 1.66
    rest_rate: float = 2.0
    holiday_rate: float = 2.0


@dataclass(frozen=True)
class InvalidWage:
    """Structured failure: the hourly wage is missing or not positive."""

    reason: str = "hourly wage must be a positive number"


@dataclass(frozen=True)
class OvertimeBreakdown:
    """Every figure of the calculation, unrounded."""

    params: OvertimePayParams = field(compare=False)
    weekday_tier1_hours: float
    weekday_tier2_hours: float
    weekday_excess_hours: float
    rest_day_hours: float
    holiday_hours: float
    weekday_pay: float
    rest_day_pay: float
    holiday_pay: float

    @property
    def total_pay(self) -> float:
        return self.weekday_pay + self.rest_day_pay + self.holiday_pay

    @property
    def exceeds_four_hours(self) -> bool:
        return self.weekday_excess_hours > 0


def round_half_up(value: float) -> int:
    """Round to the nearest whole unit, halves away from zero."""
    return int(math.floor(value + 0.5)) if value >= 0 else -int(math.floor(-value + 0.5))


def _is_known_token(token: str) -> bool:
    match = _TOKEN_RE.match(token)
    return bool(match) and match.group("key").strip().lower() in KEY_ALIASES


def is_calculator_command(text: str | None) -> bool:
    """True for a keyword alone, or a keyword followed by ``key=value`` tokens.

    "加班費計算方式是什麼？" and "Calculation of ..." start with a keyword
    but carry no recognised argument, so they stay ordinary questions.
    """
    stripped = (text or "").lstrip()
    lowered = stripped.lower()
    for kw in COMMAND_KEYWORDS:
        if not lowered.startswith(kw):
            continue
        rest = stripped[len(kw):]
        tokens = rest.split()
        if not tokens:
            return True
        at_boundary = rest[0].isspace() or _is_known_token(tokens[0])
        if at_boundary and any(_is_known_token(t) for t in tokens):
            return True
    return False


def _strip_command(text: str) -> str:
    stripped = text.strip()
    lowered = stripped.lower()
    for kw in COMMAND_KEYWORDS:
        if lowered.startswith(kw):
            return stripped[len(kw):]
    return stripped


def _coerce_number(raw: str) -> float | None:
    cleaned = _NUMERIC_CHARS_RE.sub("", to_halfwidth_digits(raw))
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        return None


def parse_args(command_text: str, defaults: OvertimePayParams | None = None) -> OvertimePayParams:
    """Turn ``key=value`` tokens into parameters; bad tokens are skipped."""
    base = defaults or OvertimePayParams()
    params = OvertimePayParams(**vars(base))

    for token in _strip_command(command_text or "").split():
        match = _TOKEN_RE.match(token)
        if not match:
            continue
        field_name = KEY_ALIASES.get(match.group("key").strip().lower())
        if field_name is None:
            continue
        value = _coerce_number(match.group("value"))
        if value is None:
            continue
        if field_name in _RATE_FIELDS and value <= 0:
            continue
        setattr(params, field_name, value)
    return params


def _clamp_hours(hours: float | None) -> float:
    if hours is None or math.isnan(hours) or hours < 0:
        return 0.0
    return float(hours)


def compute(params: OvertimePayParams) -> OvertimeBreakdown | InvalidWage:
    """Tiered overtime pay for *params*; pure function of its input."""
    wage = params.hourly_wage
    if wage is None or not isinstance(wage, (int, float)) or not math.isfinite(wage) or wage <= 0:
        return InvalidWage()

    weekday = _clamp_hours(params.weekday_hours)
    rest = _clamp_hours(params.rest_day_hours)
    holiday = _clamp_hours(params.holiday_hours)

    tier1 = min(weekday, TIER1_HOURS)
    tier2 = min(max(weekday - TIER1_HOURS, 0.0), TIER2_LIMIT_HOURS - TIER1_HOURS)
    excess = max(weekday - TIER2_LIMIT_HOURS, 0.0)

    weekday_pay = (
        wage * tier1 * params.weekday_rate1
        + wage * tier2 * params.weekday_rate2
        + wage * excess * params.weekday_rate2
    )
    return OvertimeBreakdown(
        params=params,
        weekday_tier1_hours=tier1,
        weekday_tier2_hours=tier2,
        weekday_excess_hours=excess,
        rest_day_hours=rest,
        holiday_hours=holiday,
        weekday_pay=weekday_pay,
        rest_day_pay=wage * rest * params.rest_rate,
        holiday_pay=wage * holiday * params.holiday_rate,
    )


def _fmt_hours(hours: float) -> str:
    return f"{hours:g}"


def format_breakdown(result: OvertimeBreakdown) -> str:
    """Chat-friendly breakdown; amounts are rounded here and only here."""
    p = result.params
    wage = p.hourly_wage or 0.0
    weekday_total = (
        result.weekday_tier1_hours + result.weekday_tier2_hours + result.weekday_excess_hours
    )
    lines = [
        "🧮 加班費試算結果",
        "────────────────────",
        f"時薪：{wage:g} 元",
        "",
        f"【平日加班】共 {_fmt_hours(weekday_total)} 小時",
        f"• 前 2 小時：{_fmt_hours(result.weekday_tier1_hours)} 小時 × {p.weekday_rate1:g} 倍",
        f"• 第 3～4 小時：{_fmt_hours(result.weekday_tier2_hours)} 小時 × {p.weekday_rate2:g} 倍",
    ]
    if result.exceeds_four_hours:
        lines += [
            f"• 超過 4 小時：{_fmt_hours(result.weekday_excess_hours)} 小時 × {p.weekday_rate2:g} 倍",
            "⚠️ 平日加班超過 4 小時，可能已超過單日工時上限（勞基法第 32 條），請留意。",
        ]
    lines += [
        f"小計：{round_half_up(result.weekday_pay):,} 元",
        "",
        f"【休息日】{_fmt_hours(result.rest_day_hours)} 小時 × {p.rest_rate:g} 倍",
        f"小計：{round_half_up(result.rest_day_pay):,} 元",
        "",
        f"【國定假日】{_fmt_hours(result.holiday_hours)} 小時 × {p.holiday_rate:g} 倍",
        f"小計：{round_half_up(result.holiday_pay):,} 元",
        "",
        f"💰 合計：約 {round_half_up(result.total_pay):,} 元",
        "",
        "⚠️ 試算僅供參考，實際金額依勞基法第 24 條及公司規定、實際出勤紀錄為準。",
    ]
    return "\n".join(lines)


def usage_message() -> str:
    """Reply for an unusable wage, with the command grammar and an example."""
    return "\n".join(
        [
            "🧮 加班費試算需要一個大於 0 的時薪喔！",
            "",
            "使用方式：",
            "加班費試算 時薪=<金額> 平日=<時數> 休息日=<時數> 國定假日=<時數>",
            "",
            "範例：",
            "加班費試算 時薪=183 平日=3 休息日=2",
            "",
            "可選參數：rate1、rate2（平日倍率）、rest-rate、holiday-rate",
            "預設倍率：平日前 2 小時 1.33、第 3～4 小時 1.66、休息日 2、國定假日 2。",
        ]
    )
