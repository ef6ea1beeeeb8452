"""
Compat Status Export Module

Atomic export of status.dat and objects.cache for legacy status consumers.
"""

from compatstatus.export.atomic import ExportError, atomic_commit
from compatstatus.export.exporter import StatusSnapshotExporter
from compatstatus.export.groups import GroupAggregator
from compatstatus.export.serializer import LegacyFormatSerializer

__all__ = [
    "ExportError",
    "GroupAggregator",
    "LegacyFormatSerializer",
    "StatusSnapshotExporter",
    "atomic_commit",
]
