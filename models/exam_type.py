from extensions import db

class ExamType(db.Model):
    __tablename__ = "exam_types"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    code = db.Column(db.String(20), unique=True, nullable=False)

    papers = db.relationship("Paper", back_populates="exam_type", lazy=True)

    def to_dict(self):
        return {"id": self.id, "name": self.name, "code": self.code}

    def __repr__(self):
        return f"<ExamType {self.code}>"
