import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="SyncLog",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "log_type",
                    models.CharField(
                        choices=[
                            ("bigbuy_products", "Bulk product sync"),
                            ("batch_stock_update", "Batch stock update"),
                            ("scheduled_stock_update", "Scheduled stock update"),
                        ],
                        max_length=32,
                    ),
                ),
                ("synced_count", models.PositiveIntegerField(default=0)),
                ("successful_updates", models.PositiveIntegerField(default=0)),
                ("failed_updates", models.PositiveIntegerField(default=0)),
                ("total_processed", models.PositiveIntegerField(default=0)),
                ("category", models.CharField(blank=True, default="", max_length=120)),
                ("performed_by", models.CharField(default="system", max_length=150)),
                ("details", models.JSONField(blank=True, default=dict)),
                ("timestamp", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "db_table": "sync_logs",
                "ordering": ["-timestamp"],
                "indexes": [
                    models.Index(fields=["log_type", "-timestamp"], name="sync_logs_type_ts_idx")
                ],
            },
        ),
    ]
