"""Constants for User document field names"""


class UserFields:
    """Field name constants for User documents"""
    ID = "id"
    USERNAME = "username"
    EMAIL = "email"
    FULL_NAME = "fullname"
    PASSWORD = "password"
    AVATAR = "avatar"
    COVER_IMAGE = "coverImage"
    REFRESH_TOKEN = "refreshToken"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"

    # MongoDB specific
    MONGO_ID = "_id"  # MongoDB's internal _id field

    # Never returned to clients
    SENSITIVE = (PASSWORD, REFRESH_TOKEN)
