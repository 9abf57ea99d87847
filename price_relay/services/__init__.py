"""Business logic services package.

Contains the listing extraction engine, which turns message text into price
candidates and size tokens, and the pricing calculator, which turns a unit
price into a sale price. Both are pure and keep no state between messages.
"""
