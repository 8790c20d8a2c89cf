from django.db import migrations, models


class Migration(migrations.Migration):

	initial = True

	dependencies = []

	operations = [
		migrations.CreateModel(
			name="Patient",
			fields=[
				("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
				("name", models.CharField(db_index=True, max_length=255)),
				("cpf", models.CharField(blank=True, max_length=14, null=True, unique=True)),
				("phone", models.CharField(blank=True, default="", max_length=32)),
				("birth_date", models.DateField(blank=True, null=True)),
				("created_at", models.DateTimeField(auto_now_add=True)),
				("updated_at", models.DateTimeField(auto_now=True)),
			],
			options={
				"verbose_name": "Patient",
				"verbose_name_plural": "Patients",
				"db_table": "patients_patient",
				"ordering": ["name", "id"],
			},
		),
	]
