from unirivo.models.application import Application
from unirivo.models.notification import Notification
from unirivo.models.project import Project, Role
from unirivo.models.user import User

__all__ = ["Application", "Notification", "Project", "Role", "User"]
