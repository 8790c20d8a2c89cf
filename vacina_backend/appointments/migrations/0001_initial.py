import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

	initial = True

	dependencies = [
		("core", "0001_initial"),
		("patients", "0001_initial"),
		("vaccines", "0001_initial"),
	]

	operations = [
		migrations.CreateModel(
			name="Appointment",
			fields=[
				("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
				("start", models.DateTimeField(db_index=True)),
				("end", models.DateTimeField()),
				("active", models.BooleanField(default=True)),
				("suspend_reason", models.CharField(blank=True, max_length=255, null=True)),
				("checked_in_at", models.DateTimeField(blank=True, null=True)),
				("checked_out_at", models.DateTimeField(blank=True, null=True)),
				("created_at", models.DateTimeField(auto_now_add=True)),
				("updated_at", models.DateTimeField(auto_now=True)),
				(
					"patient",
					models.ForeignKey(
						blank=True,
						null=True,
						on_delete=django.db.models.deletion.PROTECT,
						related_name="appointments",
						to="patients.patient",
					),
				),
				(
					"unit",
					models.ForeignKey(
						on_delete=django.db.models.deletion.PROTECT,
						related_name="appointments",
						to="core.healthunit",
					),
				),
			],
			options={
				"ordering": ["start", "id"],
				"indexes": [
					models.Index(fields=["unit", "start"], name="appointment_unit_start_idx"),
				],
				"constraints": [
					models.CheckConstraint(
						condition=models.Q(
							("checked_out_at__isnull", True),
							models.Q(
								("checked_in_at__isnull", False),
								("checked_in_at__lte", models.F("checked_out_at")),
							),
							_connector="OR",
						),
						name="appointment_checkout_after_checkin",
					),
					models.CheckConstraint(
						condition=models.Q(
							("suspend_reason__isnull", True),
							("active", False),
							_connector="OR",
						),
						name="appointment_suspend_reason_inactive",
					),
					models.CheckConstraint(
						condition=models.Q(("end__gte", models.F("start"))),
						name="appointment_end_after_start",
					),
				],
			},
		),
		migrations.CreateModel(
			name="Dose",
			fields=[
				("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
				("sequence_number", models.PositiveSmallIntegerField()),
				("created_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
				(
					"appointment",
					models.OneToOneField(
						on_delete=django.db.models.deletion.PROTECT,
						related_name="dose",
						to="appointments.appointment",
					),
				),
				(
					"follow_up_appointment",
					models.OneToOneField(
						blank=True,
						null=True,
						on_delete=django.db.models.deletion.SET_NULL,
						related_name="previous_dose",
						to="appointments.appointment",
					),
				),
				(
					"patient",
					models.ForeignKey(
						on_delete=django.db.models.deletion.PROTECT,
						related_name="doses",
						to="patients.patient",
					),
				),
				(
					"vaccine",
					models.ForeignKey(
						on_delete=django.db.models.deletion.PROTECT,
						related_name="doses",
						to="vaccines.vaccine",
					),
				),
			],
			options={
				"ordering": ["created_at", "id"],
				"constraints": [
					models.CheckConstraint(
						condition=models.Q(("sequence_number__gte", 1)),
						name="dose_sequence_number_positive",
					),
				],
			},
		),
	]
