# providers/models.py
from __future__ import annotations

from django.db import models
from django.utils import timezone

PERFORMED_BY_SYSTEM = "system"


class SyncLog(models.Model):
    """
    Append-only audit row, one per pipeline run (bulk sync, batch update or
    scheduled update). Nothing in the pipeline edits or deletes these.
    """

    TYPE_BULK_SYNC = "bigbuy_products"
    TYPE_BATCH_UPDATE = "batch_stock_update"
    TYPE_SCHEDULED_UPDATE = "scheduled_stock_update"
    TYPE_CHOICES = [
        (TYPE_BULK_SYNC, "Bulk product sync"),
        (TYPE_BATCH_UPDATE, "Batch stock update"),
        (TYPE_SCHEDULED_UPDATE, "Scheduled stock update"),
    ]

    log_type = models.CharField(max_length=32, choices=TYPE_CHOICES)
    synced_count = models.PositiveIntegerField(default=0)
    successful_updates = models.PositiveIntegerField(default=0)
    failed_updates = models.PositiveIntegerField(default=0)
    total_processed = models.PositiveIntegerField(default=0)
    category = models.CharField(max_length=120, blank=True, default="")
    performed_by = models.CharField(max_length=150, default=PERFORMED_BY_SYSTEM)
    details = models.JSONField(default=dict, blank=True)
    timestamp = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "sync_logs"
        ordering = ["-timestamp"]
        indexes = [
            models.Index(fields=["log_type", "-timestamp"], name="sync_logs_type_ts_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.log_type} @ {self.timestamp:%Y-%m-%d %H:%M:%S} by {self.performed_by}"
