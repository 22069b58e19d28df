"""Application constants."""

from __future__ import annotations

from enum import Enum


class CheckInOutcome(str, Enum):
    """Result of a check-in attempt."""

    RECORDED = "recorded"
    ALREADY_PRESENT = "already_present"


class UndoOutcome(str, Enum):
    """Result of an undo-check-in attempt."""

    REMOVED = "removed"
    NOTHING_TO_UNDO = "nothing_to_undo"


# Attendance day: fixed UTC+8, rolls over at 04:00 local
BOT_UTC_OFFSET_HOURS = 8
CHECKPOINT_HOUR = 4

# Absence scan lookback (attendance days)
MISSED_LOOKBACK_DAYS = 10
WARNING_LOOKBACK_DAYS = 7

# Report rendering
NAME_SEPARATOR = "\u3000"
PRESENT_GLYPH = "✅"
ABSENT_GLYPH = "❌"
MISSED_HEADER = "💢 10天没打卡："
WARNING_HEADER = "⚠️ 7天没打卡："

# Replies
MSG_NOBODY_CHECKED_IN = "今日无人打卡"
MSG_NOBODY_SLACKING = "没有人咕咕"
MSG_ALREADY_CHECKED_IN = "您今天已经打过卡莉"
MSG_NOTHING_TO_UNDO = "确实"
MSG_UNDONE = "行吧"
MSG_CHECK_IN_FAILED = "打卡失败：数据库错误"
MSG_UNDO_FAILED = "我没打卡失败：数据库错误"
MSG_MEMBER_UPDATE_FAILED = "打卡失败：无法更新用户信息"
MSG_REPORT_FAILED = "打卡日报查询失败"
MSG_SCAN_FAILED = "咕咕查询失败：数据库错误"
MSG_INVALID_DAY = "日期格式不对，应为 YYYY-MM-DD"
