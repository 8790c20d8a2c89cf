from django.db import migrations, models


class Migration(migrations.Migration):

	initial = True

	dependencies = []

	operations = [
		migrations.CreateModel(
			name="Vaccine",
			fields=[
				("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
				("name", models.CharField(max_length=100, unique=True)),
				("regimen_family", models.CharField(blank=True, db_index=True, max_length=100)),
				("doses_required", models.PositiveSmallIntegerField(default=1)),
				("dose_intervals_days", models.JSONField(blank=True, default=list)),
				("created_at", models.DateTimeField(auto_now_add=True)),
				("updated_at", models.DateTimeField(auto_now=True)),
			],
			options={
				"ordering": ["name", "id"],
				"constraints": [
					models.CheckConstraint(
						condition=models.Q(("doses_required__gte", 1)),
						name="vaccine_doses_required_positive",
					),
				],
			},
		),
	]
