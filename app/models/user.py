from ..extensions import db

ROLES = ("student", "teacher")

class User(db.Model):
    __tablename__ = "users"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    role = db.Column(db.String(16), nullable=False)
    photo_path = db.Column(db.String(255))        # stored file name under uploads/photos
    __table_args__ = (
        db.CheckConstraint("role IN ('student','teacher')", name="ck_users_role"),
    )

    assignments = db.relationship("Assignment", back_populates="creator")
    submissions = db.relationship("Submission", back_populates="student")

    def to_dict(self):
        return {"id": self.id, "name": self.name, "role": self.role,
                "photo_path": self.photo_path}
