from enum import Enum


class DistanceMetric(Enum):
    """
    The metric specifies how the service should calculate the distance
    between vectors when ranking a namespace by vector similarity.
    CosineDistance - 1 minus the cosine similarity of the two vectors
    EuclideanSquared - sum of the squared differences, without the square root
    The value is the string sent on the wire
    """

    COSINE_DISTANCE = "cosine_distance"
    EUCLIDEAN_SQUARED = "euclidean_squared"
