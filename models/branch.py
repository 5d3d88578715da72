from extensions import db

class Branch(db.Model):
    __tablename__ = "branches"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    code = db.Column(db.String(20), unique=True, nullable=False)

    papers = db.relationship("Paper", back_populates="branch", lazy=True)

    def to_dict(self):
        return {"id": self.id, "name": self.name, "code": self.code}

    def __repr__(self):
        return f"<Branch {self.code}>"
