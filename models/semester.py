from extensions import db

class Semester(db.Model):
    __tablename__ = "semesters"

    id = db.Column(db.Integer, primary_key=True)
    number = db.Column(db.Integer, unique=True, nullable=False)

    papers = db.relationship("Paper", back_populates="semester", lazy=True)

    def to_dict(self):
        return {"id": self.id, "number": self.number}

    def __repr__(self):
        return f"<Semester {self.number}>"
