from django.db import migrations, models
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='ContactSubmission',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.TextField(help_text='Name of the person making contact')),
                ('email', models.TextField(help_text='Email address for follow-up')),
                ('phone', models.TextField(help_text='Phone number as entered (normalized only for WhatsApp)')),
                ('message', models.TextField(help_text='The message content')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, help_text='When the message was submitted')),
            ],
            options={
                'verbose_name': 'Contact Submission',
                'verbose_name_plural': 'Contact Submissions',
                'db_table': 'contact_submissions',
                'ordering': ['-created_at'],
            },
        ),
    ]
