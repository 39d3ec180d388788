import uuid

import django.contrib.auth.validators
import django.db.models.deletion
import django.db.models.functions.text
import django.utils.timezone
from django.db import migrations, models

import accounts.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                ("is_superuser", models.BooleanField(default=False, help_text="Designates that this user has all permissions without explicitly assigning them.", verbose_name="superuser status")),
                ("username", models.CharField(error_messages={"unique": "A user with that username already exists."}, help_text="Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.", max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name="username")),
                ("first_name", models.CharField(blank=True, max_length=150, verbose_name="first name")),
                ("last_name", models.CharField(blank=True, max_length=150, verbose_name="last name")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="email address")),
                ("is_staff", models.BooleanField(default=False, help_text="Designates whether the user can log into this admin site.", verbose_name="staff status")),
                ("is_active", models.BooleanField(default=True, help_text="Designates whether this user should be treated as active. Unselect this instead of deleting accounts.", verbose_name="active")),
                ("date_joined", models.DateTimeField(default=django.utils.timezone.now, verbose_name="date joined")),
                ("groups", models.ManyToManyField(blank=True, help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.", related_name="user_set", related_query_name="user", to="auth.group", verbose_name="groups")),
                ("user_permissions", models.ManyToManyField(blank=True, help_text="Specific permissions for this user.", related_name="user_set", related_query_name="user", to="auth.permission", verbose_name="user permissions")),
            ],
            options={
                "verbose_name": "Administrador",
                "verbose_name_plural": "Administradores",
                "constraints": [
                    models.UniqueConstraint(django.db.models.functions.text.Lower("username"), name="unique_username_ci"),
                ],
            },
            managers=[
                ("objects", accounts.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name="Expert",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("email", models.EmailField(max_length=254, unique=True)),
                ("name", models.CharField(max_length=150)),
                ("cpf", models.CharField(blank=True, max_length=11)),
                ("whatsapp", models.CharField(blank=True, max_length=32)),
                ("profile_type", models.CharField(blank=True, choices=[("sst", "SST"), ("business", "Business")], max_length=10)),
                ("company_name", models.CharField(blank=True, max_length=200)),
                ("company_cnpj", models.CharField(blank=True, max_length=14)),
                ("served_companies", models.PositiveIntegerField(blank=True, null=True)),
                ("can_issue_invoice", models.BooleanField(default=False)),
                ("course_completed", models.BooleanField(default=False)),
                ("course_completed_at", models.DateTimeField(blank=True, null=True)),
                ("status", models.CharField(choices=[("pending", "Pendente"), ("approved", "Aprovado"), ("rejected", "Reprovado")], default="pending", max_length=10)),
                ("status_reason", models.TextField(blank=True)),
                ("pix_key", models.CharField(blank=True, max_length=140)),
                ("pix_key_type", models.CharField(blank=True, choices=[("cpf", "CPF"), ("cnpj", "CNPJ"), ("email", "E-mail"), ("phone", "Telefone"), ("random", "Chave aleatória")], max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Expert",
                "verbose_name_plural": "Experts",
                "ordering": ("name",),
            },
        ),
        migrations.CreateModel(
            name="AccessSession",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("token", models.CharField(db_index=True, max_length=64, unique=True)),
                ("valid_until", models.DateTimeField()),
                ("ip_address", models.GenericIPAddressField(blank=True, null=True)),
                ("user_agent", models.CharField(blank=True, max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("admin", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="access_sessions", to="accounts.user")),
                ("expert", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="access_sessions", to="accounts.expert")),
            ],
            options={
                "indexes": [models.Index(fields=["token", "valid_until"], name="accsession_token_valid_idx")],
            },
        ),
        migrations.CreateModel(
            name="ActivityLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("actor_type", models.CharField(choices=[("admin", "Administrador"), ("expert", "Expert"), ("system", "Sistema")], max_length=10)),
                ("actor_id", models.CharField(blank=True, max_length=64)),
                ("action", models.CharField(max_length=80)),
                ("entity_type", models.CharField(blank=True, max_length=40)),
                ("entity_id", models.CharField(blank=True, max_length=64)),
                ("details", models.JSONField(blank=True, default=dict)),
                ("ip_address", models.GenericIPAddressField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "Registro de atividade",
                "verbose_name_plural": "Registros de atividade",
                "ordering": ("-created_at", "-id"),
                "indexes": [models.Index(fields=["entity_type", "entity_id"], name="activity_entity_idx")],
            },
        ),
    ]
