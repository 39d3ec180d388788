import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        ("indications", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Benefit",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("contract_date", models.DateField()),
                ("first_client_payment_date", models.DateField()),
                ("invoice_eligible_from", models.DateField()),
                ("expected_payment_date", models.DateField()),
                ("status", models.CharField(choices=[("awaiting_client_payment", "Aguardando pagamento do cliente"), ("released_for_invoice", "Liberado para NF"), ("awaiting_review", "Aguardando conferência"), ("invoice_rejected", "NF recusada"), ("processing_payment", "Processando pagamento"), ("scheduled", "Pagamento agendado"), ("paid", "Pago")], default="awaiting_client_payment", max_length=24)),
                ("client_paid_at", models.DateTimeField(blank=True, null=True)),
                ("invoice_submitted", models.BooleanField(default=False)),
                ("invoice_submitted_at", models.DateTimeField(blank=True, null=True)),
                ("invoice_issued_on", models.DateField(blank=True, null=True)),
                ("invoice_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("invoice_file", models.CharField(blank=True, max_length=255)),
                ("invoice_rejection_reason", models.TextField(blank=True, null=True)),
                ("payment_scheduled_for", models.DateField(blank=True, null=True)),
                ("payment_made", models.BooleanField(default=False)),
                ("payment_date", models.DateField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("indication", models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name="benefit", to="indications.indication")),
                ("expert", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="benefits", to="accounts.expert")),
            ],
            options={
                "verbose_name": "Benefício",
                "verbose_name_plural": "Benefícios",
                "ordering": ("-created_at",),
                "indexes": [models.Index(fields=["status", "expected_payment_date"], name="benefit_status_payment_idx")],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("amount__gt", 0)), name="benefit_amount_positive"),
                ],
            },
        ),
    ]
