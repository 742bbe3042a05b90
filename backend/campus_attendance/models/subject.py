"""Subject model."""
from campus_attendance import db
from campus_attendance.models.base import BaseModel

class Subject(BaseModel):
    """A subject taught to one course/semester, assigned to a teacher."""
    
    __tablename__ = 'subjects'
    
    name = db.Column(db.String(255), nullable=False)
    course = db.Column(db.String(50), nullable=False)
    semester = db.Column(db.Integer, nullable=False)
    teacher_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True, index=True)
    
    __table_args__ = (
        db.Index('ix_subjects_course_semester', 'course', 'semester'),
    )
    
    teacher = db.relationship('User', backref=db.backref('subjects', lazy='dynamic'))
    
    def to_dict(self):
        """Convert to dictionary with the assigned teacher."""
        data = super().to_dict()
        data['teacher'] = None
        if self.teacher:
            data['teacher'] = {
                'id': self.teacher.id,
                'name': self.teacher.name,
                'email': self.teacher.email
            }
        return data
    
    def __repr__(self):
        return f'<Subject {self.name}>'
