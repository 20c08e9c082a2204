from django.contrib import admin
from .models import School, SchoolLocation, Project, Expert, ExpertSubject, Course, CourseExpert, CourseSession

admin.site.register(School)
admin.site.register(SchoolLocation)
admin.site.register(Project)
admin.site.register(Expert)
admin.site.register(ExpertSubject)
admin.site.register(Course)
admin.site.register(CourseExpert)
admin.site.register(CourseSession)
