from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='VisitorCounter',
            fields=[
                ('id', models.CharField(default='global', max_length=50, primary_key=True, serialize=False)),
                ('count', models.PositiveBigIntegerField(default=0)),
            ],
            options={
                'verbose_name': 'Visitor Counter',
                'verbose_name_plural': 'Visitor Counters',
                'db_table': 'visitor_counters',
            },
        ),
    ]
