"""
Web layer: the user list widget, its AJAX pager and the settings form.
"""

from reqres_users.web.app import create_app
from reqres_users.web.pager import build_pager
from reqres_users.web.render import render_user_list

__all__ = ["create_app", "build_pager", "render_user_list"]
