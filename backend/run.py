"""Application entry point."""
import os
from datetime import date, datetime, timedelta
import click
import numpy as np
from flask.cli import with_appcontext
from dotenv import load_dotenv
from campus_attendance import create_app, db

# Load environment variables
load_dotenv()

# Create Flask app
app = create_app(os.getenv('FLASK_ENV', 'development'))

@app.cli.command('create-db')
@with_appcontext
def create_db():
    """Create database tables."""
    db.create_all()
    click.echo('Database tables created successfully!')

@app.cli.command('drop-db')
@with_appcontext
def drop_db():
    """Drop all database tables."""
    if click.confirm('Are you sure you want to drop all tables?'):
        db.drop_all()
        click.echo('Database tables dropped successfully!')

@app.cli.command('reset-db')
@with_appcontext
def reset_db():
    """Reset database completely."""
    if click.confirm('This will delete all data and recreate tables. Continue?'):
        db.drop_all()
        db.create_all()
        click.echo('Database reset complete!')

@app.cli.command('seed-demo')
@with_appcontext
def seed_demo():
    """Seed one teacher, one subject, two students and a class running now."""
    from campus_attendance.models import (
        User, UserRole, Subject, ClassSession, ClassStatus
    )
    
    if User.query.filter_by(email='teacher@campus.edu').first():
        click.echo('Demo data already present.')
        return
    
    rng = np.random.default_rng(42)
    
    teacher = User(email='teacher@campus.edu', name='Demo Teacher', role=UserRole.TEACHER)
    teacher.set_password('teacher123')
    db.session.add(teacher)
    
    for index in (1, 2):
        student = User(
            email=f'student{index}@campus.edu',
            name=f'Demo Student {index}',
            role=UserRole.STUDENT,
            course='MCA',
            semester=1,
            enrollment_date=date.today() - timedelta(days=30),
            face_descriptor=rng.uniform(-0.2, 0.2, 128).round(6).tolist()
        )
        student.set_password('student123')
        db.session.add(student)
    db.session.flush()
    
    subject = Subject(name='Data Structures', course='MCA', semester=1, teacher_id=teacher.id)
    db.session.add(subject)
    db.session.flush()
    
    start = datetime.now().replace(minute=0, second=0, microsecond=0)
    end = min(start + timedelta(hours=1), start.replace(hour=23, minute=59))
    db.session.add(ClassSession(
        subject_id=subject.id,
        teacher_id=teacher.id,
        course='MCA',
        semester=1,
        date=start.date(),
        start_time=start.strftime('%H:%M'),
        end_time=end.strftime('%H:%M'),
        latitude=12.9,
        longitude=77.6,
        status=ClassStatus.SCHEDULED
    ))
    db.session.commit()
    
    click.echo('Demo data created:')
    click.echo('Teacher: teacher@campus.edu / teacher123')
    click.echo('Students: student1@campus.edu, student2@campus.edu / student123')

if __name__ == '__main__':
    # Development server
    port = int(os.environ.get('PORT', 5000))
    host = os.environ.get('HOST', '127.0.0.1')
    debug = os.environ.get('FLASK_ENV') == 'development'
    
    app.run(host=host, port=port, debug=debug)
