"""A feed-forward neural network trained with RMSProp to recognise MNIST digits."""

__version__ = "0.1.0"