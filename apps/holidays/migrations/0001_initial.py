import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('salons', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Holiday',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('month', models.PositiveSmallIntegerField()),
                ('day', models.PositiveSmallIntegerField()),
                ('kind', models.CharField(choices=[('standard', 'Standard'), ('custom', 'Custom')], db_index=True, default='standard', max_length=10)),
                ('name', models.CharField(max_length=180)),
                ('salon', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='holidays', to='salons.salon')),
            ],
            options={
                'verbose_name': 'Holiday',
                'verbose_name_plural': 'Holidays',
                'ordering': ['month', 'day'],
            },
        ),
        migrations.AddConstraint(
            model_name='holiday',
            constraint=models.UniqueConstraint(fields=('salon', 'month', 'day', 'kind'), name='uq_salon_holiday_month_day_kind'),
        ),
    ]
