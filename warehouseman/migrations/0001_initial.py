"""
Initial migration for Warehouseman models.
"""

from decimal import Decimal
import django.db.models.deletion
import django.db.models.functions.text
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create catalog, ledger and document models."""

    initial = True

    dependencies = [
        ('contenttypes', '0002_remove_content_type_name'),
    ]

    operations = [
        migrations.CreateModel(
            name='Client',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('is_deleted', models.BooleanField(db_index=True, default=False, verbose_name='Deleted')),
                ('deleted_at', models.DateTimeField(blank=True, null=True, verbose_name='Deleted at')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=200, verbose_name='Name')),
                ('is_archived', models.BooleanField(db_index=True, default=False, verbose_name='Archived')),
                ('address', models.CharField(blank=True, default='', max_length=255, verbose_name='Address')),
            ],
            options={
                'verbose_name': 'Client',
                'verbose_name_plural': 'Clients',
                'ordering': ['name'],
                'abstract': False,
                'constraints': [
                    models.UniqueConstraint(
                        django.db.models.functions.text.Lower('name'),
                        condition=models.Q(('is_deleted', False)),
                        name='warehouseman_client_unique_name',
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name='Resource',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('is_deleted', models.BooleanField(db_index=True, default=False, verbose_name='Deleted')),
                ('deleted_at', models.DateTimeField(blank=True, null=True, verbose_name='Deleted at')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=200, verbose_name='Name')),
                ('is_archived', models.BooleanField(db_index=True, default=False, verbose_name='Archived')),
            ],
            options={
                'verbose_name': 'Resource',
                'verbose_name_plural': 'Resources',
                'ordering': ['name'],
                'abstract': False,
                'constraints': [
                    models.UniqueConstraint(
                        django.db.models.functions.text.Lower('name'),
                        condition=models.Q(('is_deleted', False)),
                        name='warehouseman_resource_unique_name',
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name='UnitOfMeasure',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('is_deleted', models.BooleanField(db_index=True, default=False, verbose_name='Deleted')),
                ('deleted_at', models.DateTimeField(blank=True, null=True, verbose_name='Deleted at')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=200, verbose_name='Name')),
                ('is_archived', models.BooleanField(db_index=True, default=False, verbose_name='Archived')),
            ],
            options={
                'verbose_name': 'Unit of measure',
                'verbose_name_plural': 'Units of measure',
                'ordering': ['name'],
                'abstract': False,
                'constraints': [
                    models.UniqueConstraint(
                        django.db.models.functions.text.Lower('name'),
                        condition=models.Q(('is_deleted', False)),
                        name='warehouseman_unitofmeasure_unique_name',
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name='Balance',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12, verbose_name='Quantity')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('resource', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='balances', to='warehouseman.resource', verbose_name='Resource')),
                ('unit', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='balances', to='warehouseman.unitofmeasure', verbose_name='Unit')),
            ],
            options={
                'verbose_name': 'Balance',
                'verbose_name_plural': 'Balances',
                'ordering': ['resource__name', 'unit__name'],
                'constraints': [
                    models.UniqueConstraint(fields=('resource', 'unit'), name='unique_balance_key'),
                    models.CheckConstraint(condition=models.Q(('quantity__gte', 0)), name='balance_quantity_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Movement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('delta', models.DecimalField(decimal_places=3, help_text='Positive = in, negative = out', max_digits=12, verbose_name='Delta')),
                ('reference_id', models.PositiveBigIntegerField(blank=True, null=True, verbose_name='Reference ID')),
                ('reason', models.CharField(help_text='Required. E.g. "supply.created", "shipment.signed"', max_length=255, verbose_name='Reason')),
                ('metadata', models.JSONField(blank=True, default=dict, verbose_name='Metadata')),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Timestamp')),
                ('balance', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='movements', to='warehouseman.balance', verbose_name='Balance')),
                ('reference_type', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='contenttypes.contenttype', verbose_name='Reference type')),
            ],
            options={
                'verbose_name': 'Movement',
                'verbose_name_plural': 'Movements',
                'ordering': ['timestamp', 'id'],
                'indexes': [
                    models.Index(fields=['balance', 'timestamp'], name='wm_movement_balance_ts_idx'),
                    models.Index(fields=['reference_type', 'reference_id'], name='wm_movement_reference_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='SupplyDocument',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('is_deleted', models.BooleanField(db_index=True, default=False, verbose_name='Deleted')),
                ('deleted_at', models.DateTimeField(blank=True, null=True, verbose_name='Deleted at')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('number', models.CharField(max_length=50, verbose_name='Number')),
                ('date', models.DateField(db_index=True, verbose_name='Date')),
            ],
            options={
                'verbose_name': 'Supply',
                'verbose_name_plural': 'Supplies',
                'ordering': ['-date', 'number'],
                'abstract': False,
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('is_deleted', False)), fields=('number',), name='warehouseman_supplydocument_unique_number'),
                ],
            },
        ),
        migrations.CreateModel(
            name='SupplyItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantity')),
                ('document', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='warehouseman.supplydocument', verbose_name='Supply')),
                ('resource', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='warehouseman.resource', verbose_name='Resource')),
                ('unit', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='warehouseman.unitofmeasure', verbose_name='Unit')),
            ],
            options={
                'verbose_name': 'Supply item',
                'verbose_name_plural': 'Supply items',
                'ordering': ['id'],
                'abstract': False,
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('quantity__gt', 0)), name='warehouseman_supplyitem_quantity_positive'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ShipmentDocument',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('is_deleted', models.BooleanField(db_index=True, default=False, verbose_name='Deleted')),
                ('deleted_at', models.DateTimeField(blank=True, null=True, verbose_name='Deleted at')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('number', models.CharField(max_length=50, verbose_name='Number')),
                ('date', models.DateField(db_index=True, verbose_name='Date')),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('signed', 'Signed'), ('revoked', 'Revoked')], db_index=True, default='draft', max_length=20, verbose_name='Status')),
                ('client', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='shipments', to='warehouseman.client', verbose_name='Client')),
            ],
            options={
                'verbose_name': 'Shipment',
                'verbose_name_plural': 'Shipments',
                'ordering': ['-date', 'number'],
                'abstract': False,
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('is_deleted', False)), fields=('number',), name='warehouseman_shipmentdocument_unique_number'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ShipmentItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantity')),
                ('document', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='warehouseman.shipmentdocument', verbose_name='Shipment')),
                ('resource', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='warehouseman.resource', verbose_name='Resource')),
                ('unit', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='warehouseman.unitofmeasure', verbose_name='Unit')),
            ],
            options={
                'verbose_name': 'Shipment item',
                'verbose_name_plural': 'Shipment items',
                'ordering': ['id'],
                'abstract': False,
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('quantity__gt', 0)), name='warehouseman_shipmentitem_quantity_positive'),
                ],
            },
        ),
    ]
