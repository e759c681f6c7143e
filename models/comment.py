from models.base_model import BaseModel


class Comment(BaseModel):
    __collection__ = "comments"
    __fields__ = ("post", "content", "owner")

    post = None  # ObjectId of the parent post
    content = None
    owner = None
