"""Attendance tracking services."""

from callcal.services.attendance.models import DayEntry, GroupMember, MemberRecord, ScanResult
from callcal.services.attendance.service import AttendanceService

__all__ = ["AttendanceService", "DayEntry", "GroupMember", "MemberRecord", "ScanResult"]
