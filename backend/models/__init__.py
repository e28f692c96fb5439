# Importing the package registers every table on database.Base
from models import users, product, customer, counter, sale, purchase, adjustment, log  # noqa: F401
