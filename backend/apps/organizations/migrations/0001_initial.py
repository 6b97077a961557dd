from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Organization",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("deleted_at", models.DateTimeField(blank=True, db_index=True, null=True)),
                ("name", models.CharField(help_text="Globally unique organization name", max_length=255, unique=True)),
                ("billing_email", models.EmailField(help_text="Billing contact address", max_length=254)),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
