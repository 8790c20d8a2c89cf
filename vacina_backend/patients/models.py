from django.db import models


class Patient(models.Model):
    """Patient registry entry.

    Registry data is maintained outside the reception workflow; reception only
    reads the name (display, search, ordering) and the patient's appointment
    and dose history.
    """

    name = models.CharField(max_length=255, db_index=True)
    cpf = models.CharField(max_length=14, unique=True, null=True, blank=True)
    phone = models.CharField(max_length=32, blank=True, default='')
    birth_date = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'patients_patient'
        ordering = ['name', 'id']
        verbose_name = 'Patient'
        verbose_name_plural = 'Patients'

    def __str__(self) -> str:
        return f"{self.name} (id={self.id})"
