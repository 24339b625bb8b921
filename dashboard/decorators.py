from functools import wraps

from django.conf import settings
from django.contrib import messages
from django.contrib.auth.views import redirect_to_login


def staff_access(view_func):
    @wraps(view_func)
    def wrapper_func(request, *args, **kwargs):
        if request.user.is_authenticated and request.user.is_staff:
            return view_func(request, *args, **kwargs)

        if request.user.is_authenticated:
            messages.info(request, 'Only staff members can access the back office')
        else:
            messages.info(request, 'Please Login to access this page')
        return redirect_to_login(request.get_full_path(), settings.LOGIN_URL)

    return wrapper_func
