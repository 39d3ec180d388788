# indications/signals.py
from django.db.models.signals import pre_save
from django.dispatch import receiver

from .models import Indication


@receiver(pre_save, sender=Indication)
def indication_expiration_autoset(sender, instance: Indication, **kwargs):
    # regra dos 90 dias : calculada na criação, nunca reescrita
    if not instance.expires_at:
        instance.ensure_expiration()
