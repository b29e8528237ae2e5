import django.db.models.deletion
import uuid6
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


def money():
    return models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10)


STATUS_CHOICES = [
    ("pendente", "Pendente"),
    ("aceito", "Aceito"),
    ("preparo", "Em preparo"),
    ("pronto", "Pronto"),
    ("entrega", "Saiu para entrega"),
    ("concluido", "Concluído"),
    ("cancelado", "Cancelado"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("establishments", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("number", models.PositiveIntegerField(editable=False)),
                (
                    "tracking_code",
                    models.CharField(editable=False, max_length=12, unique=True),
                ),
                (
                    "status",
                    models.CharField(
                        choices=STATUS_CHOICES, default="pendente", max_length=20
                    ),
                ),
                (
                    "delivery_type",
                    models.CharField(
                        choices=[("delivery", "Delivery"), ("retirada", "Retirada")],
                        default="delivery",
                        max_length=20,
                    ),
                ),
                (
                    "payment_method",
                    models.CharField(
                        choices=[
                            ("dinheiro", "Dinheiro"),
                            ("pix", "Pix"),
                            ("credito", "Crédito"),
                            ("debito", "Débito"),
                        ],
                        default="pix",
                        max_length=20,
                    ),
                ),
                ("customer_name", models.CharField(max_length=255)),
                (
                    "customer_phone",
                    models.CharField(blank=True, default="", max_length=30),
                ),
                (
                    "neighborhood",
                    models.CharField(blank=True, default="", max_length=120),
                ),
                ("city", models.CharField(blank=True, default="", max_length=120)),
                ("subtotal", money()),
                ("delivery_fee", money()),
                ("discount", money()),
                ("total", money()),
                ("accepted_at", models.DateTimeField(blank=True, null=True)),
                ("prepped_at", models.DateTimeField(blank=True, null=True)),
                ("ready_at", models.DateTimeField(blank=True, null=True)),
                ("delivering_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("cancellation_reason", models.TextField(blank=True, null=True)),
                (
                    "establishment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to="establishments.establishment",
                    ),
                ),
            ],
            options={
                "db_table": "orders",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status"], name="orders_status_idx"),
                    models.Index(fields=["-created_at"], name="orders_created_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("establishment", "number"),
                        name="orders_establishment_number_uniq",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderStatusHistory",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "previous_status",
                    models.CharField(
                        blank=True, choices=STATUS_CHOICES, max_length=20, null=True
                    ),
                ),
                (
                    "new_status",
                    models.CharField(choices=STATUS_CHOICES, max_length=20),
                ),
                ("observation", models.TextField(blank=True, null=True)),
                (
                    "actor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="status_history",
                        to="orders.order",
                    ),
                ),
            ],
            options={
                "db_table": "order_status_history",
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["order", "created_at"],
                        name="osh_order_created_idx",
                    ),
                ],
            },
        ),
    ]
