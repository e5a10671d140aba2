from backoffice.core.db import MongoModel


class Accessory(MongoModel):
    name: str
