from django.db import migrations, models
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Note',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('subject', models.CharField(help_text="Subject the note belongs to (e.g., 'Electronics')", max_length=100)),
                ('title', models.CharField(help_text='Display title', max_length=255)),
                ('link', models.URLField(help_text='Download or view URL', max_length=500)),
                ('size_mb', models.FloatField(blank=True, help_text='File size in megabytes', null=True)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
            ],
            options={
                'verbose_name': 'Note',
                'verbose_name_plural': 'Notes',
                'db_table': 'notes',
                'ordering': ['-created_at'],
            },
        ),
    ]
