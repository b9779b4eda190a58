"""Authentication, authorization and request throttling."""
