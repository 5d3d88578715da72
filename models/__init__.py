from .user import User
from .admin_user import AdminUser
from .branch import Branch
from .semester import Semester
from .exam_type import ExamType
from .paper import Paper
__all__ = ["User", "AdminUser", "Branch", "Semester", "ExamType", "Paper"]
