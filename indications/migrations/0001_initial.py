import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Indication",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("company_name", models.CharField(max_length=200)),
                ("company_cnpj", models.CharField(db_index=True, max_length=14)),
                ("contact_name", models.CharField(max_length=150)),
                ("contact_email", models.EmailField(blank=True, max_length=254)),
                ("contact_phone", models.CharField(blank=True, max_length=32)),
                ("employee_count", models.PositiveIntegerField(blank=True, null=True)),
                ("channel", models.CharField(choices=[("technical_report", "Relatório técnico"), ("email", "E-mail"), ("chat", "Conversa (WhatsApp)")], default="technical_report", max_length=20)),
                ("notes", models.TextField(blank=True)),
                ("status", models.CharField(choices=[("awaiting_validation", "Aguardando validação"), ("under_analysis", "Em análise"), ("validation_rejected", "Validação recusada"), ("in_contact", "Em contato"), ("contracted", "Contratou"), ("lost", "Perdido"), ("invoice_sent", "NF enviada"), ("paid", "Pago")], default="awaiting_validation", max_length=24)),
                ("crm_stage", models.CharField(blank=True, choices=[("initial_contact", "Contato inicial"), ("presentation_scheduled", "Apresentação marcada"), ("presentation_done", "Apresentação feita"), ("proposal_sent", "Proposta enviada"), ("under_evaluation", "Em avaliação"), ("negotiation", "Negociação"), ("contract_sent", "Contrato enviado"), ("contract_signed", "Contrato assinado"), ("lost", "Perdido")], max_length=24, null=True)),
                ("rejection_reason", models.TextField(blank=True, null=True)),
                ("validated_at", models.DateTimeField(blank=True, null=True)),
                ("expires_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("expert", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="indications", to="accounts.expert")),
                ("validated_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="validated_indications", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Indicação",
                "verbose_name_plural": "Indicações",
                "ordering": ("-created_at",),
                "indexes": [
                    models.Index(fields=["status", "created_at"], name="indication_status_created_idx"),
                    models.Index(fields=["expert", "status"], name="indication_expert_status_idx"),
                ],
            },
        ),
    ]
