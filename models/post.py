from models.base_model import BaseModel


class Post(BaseModel):
    __collection__ = "posts"
    __fields__ = ("title", "content", "owner")

    title = None
    content = None
    owner = None  # ObjectId of the author (users._id); not enforced by MongoDB
