"""
Admin sidebar layout for the campus yoga dashboard.

Staff mostly work with classes and series, so those come first; rooms and
buildings change rarely and sit below registrations.
"""
from django.contrib import admin


ADMIN_GROUPS = [
    ('Classes', [
        ('classes', 'yogaclass'),
        ('classes', 'classseries'),
    ]),
    ('Registrations', [
        ('accounts', 'classregistration'),
    ]),
    ('Locations', [
        ('classes', 'building'),
        ('classes', 'room'),
    ]),
    ('Settings', [
        ('auth', 'user'),
        ('auth', 'group'),
    ]),
]


_default_get_app_list = admin.AdminSite.get_app_list


def _model_key(app, model):
    return (app['app_label'], model['object_name'].lower())


def group_app_list(original_app_list, groups=ADMIN_GROUPS):
    """
    Regroup an admin app list into ``groups``, in their order.

    Models no group names stay under their own app, after the groups.
    """
    unplaced = {
        _model_key(app, model): model
        for app in original_app_list
        for model in app['models']
    }

    grouped = []
    for group_name, model_keys in groups:
        models = [unplaced.pop(key) for key in model_keys if key in unplaced]
        if not models:
            continue
        grouped.append({
            'name': group_name,
            'app_label': group_name.lower().replace(' ', '_'),
            'app_url': '#',
            'has_module_perms': True,
            'models': models,
        })

    for app in original_app_list:
        leftover = [model for model in app['models'] if _model_key(app, model) in unplaced]
        if leftover:
            grouped.append({
                'name': app['name'],
                'app_label': app['app_label'],
                'app_url': app.get('app_url', '#'),
                'has_module_perms': app.get('has_module_perms', True),
                'models': leftover,
            })

    return grouped


def _grouped_get_app_list(self, request, app_label=None):
    app_list = _default_get_app_list(self, request, app_label)
    # single-app index pages keep Django's layout
    if app_label:
        return app_list
    return group_app_list(app_list)


def configure_admin():
    """Install the grouped sidebar and the campus yoga site titles."""
    admin.AdminSite.get_app_list = _grouped_get_app_list
    admin.site.site_header = "Campus Yoga Admin"
    admin.site.site_title = "Campus Yoga"
    admin.site.index_title = "Class schedule management"
