"""
Student union offices feature module.

Seeds the catalog of Executive, Senate and ClassRep offices, assigns students
to them per academic session, enforces category restrictions and keeps the
full assignment history.
"""
