"""
学生兼职/实习招聘平台后端

Student Job Board API
"""

__version__ = "1.0.0"
