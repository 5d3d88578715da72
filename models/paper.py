from extensions import db

class Paper(db.Model):
    __tablename__ = "papers"

    id = db.Column(db.Integer, primary_key=True)

    branch_id = db.Column(
        db.Integer,
        db.ForeignKey("branches.id"),
        nullable=False
    )

    semester_id = db.Column(
        db.Integer,
        db.ForeignKey("semesters.id"),
        nullable=False
    )

    exam_type_id = db.Column(
        db.Integer,
        db.ForeignKey("exam_types.id"),
        nullable=False
    )

    subject_name = db.Column(db.String(255), nullable=True)
    year = db.Column(db.Integer, nullable=False)
    file_url = db.Column(db.String(2000), nullable=False)

    # Only ever changed through data_client.increment_views / increment_downloads
    downloads = db.Column(db.Integer, nullable=False, default=0, server_default="0")
    views = db.Column(db.Integer, nullable=False, default=0, server_default="0")

    created_at = db.Column(db.DateTime, server_default=db.func.now())
    deleted_at = db.Column(db.DateTime, nullable=True)

    branch = db.relationship("Branch", back_populates="papers", lazy="joined")
    semester = db.relationship("Semester", back_populates="papers", lazy="joined")
    exam_type = db.relationship("ExamType", back_populates="papers", lazy="joined")

    __table_args__ = (
        db.Index("idx_papers_branch_semester_year", "branch_id", "semester_id", "year"),
    )

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    def to_dict(self):
        return {
            "id": self.id,
            "branch_id": self.branch_id,
            "semester_id": self.semester_id,
            "exam_type_id": self.exam_type_id,
            "subject_name": self.subject_name,
            "year": self.year,
            "file_url": self.file_url,
            "downloads": self.downloads or 0,
            "views": self.views or 0,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "deleted_at": self.deleted_at.isoformat() if self.deleted_at else None,
            "branch": {"name": self.branch.name, "code": self.branch.code} if self.branch else None,
            "semester": {"number": self.semester.number} if self.semester else None,
            "exam_type": {"name": self.exam_type.name, "code": self.exam_type.code} if self.exam_type else None,
        }

    def __repr__(self):
        return f"<Paper {self.id} {self.subject_name!r} {self.year}>"
