from extensions import db

class AdminUser(db.Model):
    """Allow-list of emails that may use the admin dashboard."""
    __tablename__ = "admin_users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    def __repr__(self):
        return f"<AdminUser {self.email}>"
