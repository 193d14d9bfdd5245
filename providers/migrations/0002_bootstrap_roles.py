from django.db import migrations

ROLE_GROUPS = ["admin", "editor"]


def create_groups(apps, schema_editor):
    Group = apps.get_model("auth", "Group")
    Permission = apps.get_model("auth", "Permission")
    ContentType = apps.get_model("contenttypes", "ContentType")

    Product = apps.get_model("catalog", "Product")
    AdminProduct = apps.get_model("catalog", "AdminProduct")
    SyncLog = apps.get_model("providers", "SyncLog")

    def perms_for(model, actions):
        ct = ContentType.objects.get_for_model(model)
        return list(
            Permission.objects.filter(
                content_type=ct, codename__in=[f"{a}_{ct.model}" for a in actions]
            )
        )

    groups = {name: Group.objects.get_or_create(name=name)[0] for name in ROLE_GROUPS}

    all_actions = ["view", "add", "change", "delete"]
    groups["admin"].permissions.add(
        *set(
            perms_for(Product, all_actions)
            + perms_for(AdminProduct, all_actions)
            + perms_for(SyncLog, ["view"])
        )
    )
    # editors curate the admin copy; stock and imports stay with admins
    groups["editor"].permissions.add(
        *set(
            perms_for(Product, ["view"])
            + perms_for(AdminProduct, ["view", "change"])
            + perms_for(SyncLog, ["view"])
        )
    )


def drop_groups(apps, schema_editor):
    Group = apps.get_model("auth", "Group")
    Group.objects.filter(name__in=ROLE_GROUPS).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("providers", "0001_initial"),
        ("catalog", "0001_initial"),
        ("auth", "0012_alter_user_first_name_max_length"),
        ("contenttypes", "0002_remove_content_type_name"),
    ]
    operations = [migrations.RunPython(create_groups, reverse_code=drop_groups)]
