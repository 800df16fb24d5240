import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='GenerationLease',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True)),
                ('owner', models.CharField(max_length=64)),
                ('acquired_at', models.DateTimeField()),
                ('expires_at', models.DateTimeField()),
            ],
        ),
        migrations.CreateModel(
            name='Horse',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('stable_id', models.CharField(db_index=True, max_length=64)),
                ('horse_group_id', models.CharField(blank=True, db_index=True, max_length=64)),
                ('name', models.CharField(max_length=255)),
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive')], default='active', max_length=20)),
            ],
            options={
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='RecurringActivity',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('organization_id', models.CharField(blank=True, max_length=64)),
                ('stable_id', models.CharField(db_index=True, max_length=64)),
                ('stable_name', models.CharField(blank=True, max_length=255)),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('category', models.CharField(choices=[('feeding', 'Feeding'), ('mucking', 'Mucking'), ('turnout', 'Turnout'), ('bring-in', 'Bring in'), ('health', 'Health'), ('grooming', 'Grooming'), ('cleaning', 'Cleaning'), ('water', 'Water'), ('hay', 'Hay'), ('other', 'Other')], default='other', max_length=20)),
                ('color', models.CharField(blank=True, max_length=20)),
                ('icon', models.CharField(blank=True, max_length=50)),
                ('recurrence_rule', models.CharField(help_text="Rule such as 'RRULE:FREQ=WEEKLY;BYDAY=MO,WE,FR'", max_length=255)),
                ('pattern_start_date', models.DateField(blank=True, help_text='First date the rule applies', null=True)),
                ('pattern_end_date', models.DateField(blank=True, help_text='Last date the rule applies', null=True)),
                ('time_of_day', models.TimeField(help_text='Local start time of each occurrence')),
                ('duration_minutes', models.PositiveIntegerField(default=30)),
                ('assignment_mode', models.CharField(choices=[('fixed', 'Fixed'), ('rotation', 'Rotation'), ('fair-distribution', 'Fair distribution')], default='fixed', max_length=20)),
                ('assigned_to', models.CharField(blank=True, max_length=64)),
                ('assigned_to_name', models.CharField(blank=True, max_length=255)),
                ('rotation_group', models.JSONField(blank=True, default=list, help_text='Ordered list of user ids')),
                ('rotation_group_names', models.JSONField(blank=True, default=list)),
                ('current_rotation_index', models.PositiveIntegerField(default=0)),
                ('horse_id', models.CharField(blank=True, max_length=64)),
                ('horse_name', models.CharField(blank=True, max_length=255)),
                ('applies_to_all_horses', models.BooleanField(default=False)),
                ('horse_group_id', models.CharField(blank=True, max_length=64)),
                ('horse_group_name', models.CharField(blank=True, max_length=255)),
                ('weight', models.FloatField(default=1)),
                ('is_holiday_multiplied', models.BooleanField(default=False)),
                ('generate_days_ahead', models.PositiveIntegerField(default=60)),
                ('status', models.CharField(choices=[('active', 'Active'), ('paused', 'Paused'), ('archived', 'Archived')], default='active', max_length=20)),
                ('last_generated_date', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name_plural': 'recurring activities',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='ActivityInstance',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('organization_id', models.CharField(blank=True, max_length=64)),
                ('stable_id', models.CharField(db_index=True, max_length=64)),
                ('stable_name', models.CharField(blank=True, max_length=255)),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('category', models.CharField(choices=[('feeding', 'Feeding'), ('mucking', 'Mucking'), ('turnout', 'Turnout'), ('bring-in', 'Bring in'), ('health', 'Health'), ('grooming', 'Grooming'), ('cleaning', 'Cleaning'), ('water', 'Water'), ('hay', 'Hay'), ('other', 'Other')], default='other', max_length=20)),
                ('color', models.CharField(blank=True, max_length=20)),
                ('icon', models.CharField(blank=True, max_length=50)),
                ('scheduled_date', models.DateField()),
                ('scheduled_time', models.TimeField()),
                ('scheduled_end_time', models.TimeField()),
                ('duration_minutes', models.PositiveIntegerField()),
                ('assigned_to', models.CharField(blank=True, max_length=64)),
                ('assigned_to_name', models.CharField(blank=True, max_length=255)),
                ('assigned_at', models.DateTimeField(blank=True, null=True)),
                ('assigned_by', models.CharField(blank=True, max_length=64)),
                ('rotation_index', models.PositiveIntegerField(blank=True, help_text='Rotation slot this occurrence was assigned from', null=True)),
                ('horse_id', models.CharField(blank=True, max_length=64)),
                ('horse_name', models.CharField(blank=True, max_length=255)),
                ('applies_to_all_horses', models.BooleanField(default=False)),
                ('horse_group_id', models.CharField(blank=True, max_length=64)),
                ('horse_group_name', models.CharField(blank=True, max_length=255)),
                ('checklist', models.JSONField(blank=True, default=list)),
                ('progress', models.JSONField(blank=True, default=dict)),
                ('status', models.CharField(choices=[('scheduled', 'Scheduled'), ('in_progress', 'In progress'), ('completed', 'Completed'), ('missed', 'Missed'), ('cancelled', 'Cancelled'), ('skipped', 'Skipped')], default='scheduled', max_length=20)),
                ('is_exception', models.BooleanField(default=False)),
                ('exception_note', models.TextField(blank=True)),
                ('weight', models.FloatField(default=1)),
                ('is_holiday_shift', models.BooleanField(default=False)),
                ('created_by', models.CharField(default='system', max_length=64)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('recurring_activity', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='instances', to='recurring_app.recurringactivity')),
            ],
            options={
                'ordering': ['scheduled_date', 'scheduled_time'],
                'constraints': [models.UniqueConstraint(fields=('recurring_activity', 'scheduled_date'), name='unique_instance_per_activity_date')],
            },
        ),
        migrations.CreateModel(
            name='RecurringActivityException',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('exception_date', models.DateField(help_text='Date of the occurrence this exception affects')),
                ('exception_type', models.CharField(choices=[('skip', 'Skip this occurrence'), ('modify', 'Modify this occurrence')], max_length=10)),
                ('modified_title', models.CharField(blank=True, max_length=255)),
                ('modified_time', models.TimeField(blank=True, null=True)),
                ('modified_assigned_to', models.CharField(blank=True, max_length=64)),
                ('modified_assigned_to_name', models.CharField(blank=True, max_length=255)),
                ('reason', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('recurring_activity', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='exceptions', to='recurring_app.recurringactivity')),
            ],
            options={
                'ordering': ['exception_date'],
                'unique_together': {('recurring_activity', 'exception_date')},
            },
        ),
    ]
