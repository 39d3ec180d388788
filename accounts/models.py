# accounts/models.py
import secrets
import uuid
from datetime import timedelta

from django.contrib.auth.models import AbstractUser
from django.contrib.auth.models import UserManager as DjangoUserManager
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models.functions import Lower
from django.utils import timezone


class UserManager(DjangoUserManager):
    """Todo usuário Django do projeto é membro do back office."""

    def create_user(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        return super().create_user(username, email, password, **extra_fields)


class User(AbstractUser):
    """Administrador do back office CorpVox Experts."""

    objects = UserManager()

    def __str__(self):
        return self.get_full_name() or self.username

    class Meta:
        verbose_name = "Administrador"
        verbose_name_plural = "Administradores"
        constraints = [
            models.UniqueConstraint(
                Lower("username"),
                name="unique_username_ci",
            ),
        ]


class Expert(models.Model):
    """Parceiro externo que indica empresas."""

    class Status(models.TextChoices):
        PENDING = "pending", "Pendente"
        APPROVED = "approved", "Aprovado"
        REJECTED = "rejected", "Reprovado"

    class ProfileType(models.TextChoices):
        SST = "sst", "SST"
        BUSINESS = "business", "Business"

    class PixKeyType(models.TextChoices):
        CPF = "cpf", "CPF"
        CNPJ = "cnpj", "CNPJ"
        EMAIL = "email", "E-mail"
        PHONE = "phone", "Telefone"
        RANDOM = "random", "Chave aleatória"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=150)
    cpf = models.CharField(max_length=11, blank=True)
    whatsapp = models.CharField(max_length=32, blank=True)
    profile_type = models.CharField(max_length=10, choices=ProfileType.choices, blank=True)

    company_name = models.CharField(max_length=200, blank=True)
    company_cnpj = models.CharField(max_length=14, blank=True)
    served_companies = models.PositiveIntegerField(null=True, blank=True)
    can_issue_invoice = models.BooleanField(default=False)

    course_completed = models.BooleanField(default=False)
    course_completed_at = models.DateTimeField(null=True, blank=True)

    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    status_reason = models.TextField(blank=True)

    pix_key = models.CharField(max_length=140, blank=True)
    pix_key_type = models.CharField(max_length=10, choices=PixKeyType.choices, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("name",)
        verbose_name = "Expert"
        verbose_name_plural = "Experts"

    def __str__(self):
        return f"{self.name} <{self.email}>"

    def save(self, *args, **kwargs):
        self.email = (self.email or "").strip().lower()
        super().save(*args, **kwargs)

    @property
    def can_submit_indications(self) -> bool:
        return self.status == self.Status.APPROVED and self.course_completed


class AccessSession(models.Model):
    """
    Sessão do lado do servidor (token Bearer). Pertence a um admin ou a um
    expert ; a validade é sempre verificada aqui, nunca no cliente.
    """
    token = models.CharField(max_length=64, unique=True, db_index=True)
    admin = models.ForeignKey(
        User, on_delete=models.CASCADE, null=True, blank=True, related_name="access_sessions"
    )
    expert = models.ForeignKey(
        Expert, on_delete=models.CASCADE, null=True, blank=True, related_name="access_sessions"
    )
    valid_until = models.DateTimeField()
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [models.Index(fields=["token", "valid_until"], name="accsession_token_valid_idx")]

    def clean(self):
        if bool(self.admin_id) == bool(self.expert_id):
            raise ValidationError("Uma sessão pertence a um administrador ou a um expert.")

    def ensure_token(self, hours: int, force: bool = False):
        if force or not self.token:
            self.token = secrets.token_urlsafe(32)
        if not self.valid_until:
            self.valid_until = timezone.now() + timedelta(hours=int(hours))

    @property
    def is_valid(self) -> bool:
        return self.valid_until > timezone.now()

    def __str__(self):
        owner = self.admin or self.expert
        return f"{owner} • até {self.valid_until:%d/%m/%Y %H:%M}"


class ActivityLog(models.Model):
    class ActorType(models.TextChoices):
        ADMIN = "admin", "Administrador"
        EXPERT = "expert", "Expert"
        SYSTEM = "system", "Sistema"

    actor_type = models.CharField(max_length=10, choices=ActorType.choices)
    actor_id = models.CharField(max_length=64, blank=True)
    action = models.CharField(max_length=80)
    entity_type = models.CharField(max_length=40, blank=True)
    entity_id = models.CharField(max_length=64, blank=True)
    details = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at", "-id")
        indexes = [models.Index(fields=["entity_type", "entity_id"], name="activity_entity_idx")]
        verbose_name = "Registro de atividade"
        verbose_name_plural = "Registros de atividade"

    def __str__(self):
        return f"{self.action} • {self.entity_type}:{self.entity_id}"
