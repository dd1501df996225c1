"""OHW registration module (transition, reminder scheduler, API, Celery worker).

An inbound pregnancy registration is validated, assigned a patient id and
given a schedule of reminder SMS messages computed from the reported weeks
since last menstrual period.
"""
