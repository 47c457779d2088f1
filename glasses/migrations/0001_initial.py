from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Category',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255, unique=True)),
                ('description', models.TextField(blank=True, default='')),
            ],
            options={
                'verbose_name_plural': 'Categories',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Glasses',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('price', models.DecimalField(decimal_places=2, max_digits=10)),
                ('identifier', models.CharField(max_length=64, unique=True)),
                ('color', models.CharField(max_length=64)),
                ('model', models.CharField(max_length=128)),
                ('manufacturer', models.CharField(max_length=128)),
                ('is_deleted', models.BooleanField(default=False)),
                ('categories', models.ManyToManyField(blank=True, related_name='glasses', to='glasses.category')),
            ],
            options={
                'verbose_name_plural': 'Glasses',
                'ordering': ['id'],
                'indexes': [models.Index(fields=['model', 'manufacturer'], name='glasses_model_manufacturer_idx')],
            },
        ),
    ]
