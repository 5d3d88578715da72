from extensions import db
from flask_login import UserMixin

class User(UserMixin, db.Model):
    """Credential record of the sign-in service.

    Holding a valid credential does not make someone an admin; that also
    needs a matching row in ``admin_users``.
    """
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)

    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, server_default=db.func.now())
    last_sign_in_at = db.Column(db.DateTime, nullable=True)

    def get_id(self):
        return str(self.id)

    def __repr__(self):
        return f"<User {self.email}>"
