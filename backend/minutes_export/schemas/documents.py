"""Structured Minutes-of-Meeting and product specification records."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class MomAttendee(BaseModel):
    name: str = Field(..., description="Attendee name")
    role: str = Field(default="", description="Role or organisation of the attendee")


class MomTopic(BaseModel):
    topic: str = Field(..., description="Discussion topic")
    key_points: str = Field(default="", alias="keyPoints", description="Summary of the discussion")
    decision: str = Field(default="", description="Decision taken on the topic")

    model_config = {"populate_by_name": True}


class MomActionItem(BaseModel):
    action: str = Field(..., description="Action to be performed")
    pic: str = Field(default="", description="Person in charge")
    due_date: str = Field(default="", alias="dueDate", description="Due date as written in the meeting")

    model_config = {"populate_by_name": True}


class MomRisk(BaseModel):
    risk: str = Field(..., description="Identified risk")
    impact: str = Field(default="", description="Expected impact")
    mitigation: str = Field(default="", description="Planned mitigation")


class MomOpenIssue(BaseModel):
    question: str = Field(..., description="Unresolved question")
    owner: str = Field(default="", description="Who follows up on the question")


class MomNextMeeting(BaseModel):
    date: str = Field(default="", description="Date of the next meeting")
    agenda: str = Field(default="", description="Planned agenda")
    expected_outcome: str = Field(default="", alias="expectedOutcome", description="Expected outcome")

    model_config = {"populate_by_name": True}


class MomReview(BaseModel):
    """Reviewed Minutes of Meeting as edited by the user."""

    project_name: str = Field(default="", alias="projectName")
    meeting_title: str = Field(default="", alias="meetingTitle")
    meeting_objective: str = Field(default="", alias="meetingObjective")
    meeting_date: str = Field(default="", alias="meetingDate")
    meeting_time: str = Field(default="", alias="meetingTime")
    meeting_location: str = Field(default="", alias="meetingLocation")
    attendees: List[MomAttendee] = Field(default_factory=list)
    topics: List[MomTopic] = Field(default_factory=list)
    action_items: List[MomActionItem] = Field(default_factory=list, alias="actionItems")
    risks: List[MomRisk] = Field(default_factory=list)
    open_issues: List[MomOpenIssue] = Field(default_factory=list, alias="openIssues")
    next_meeting: MomNextMeeting = Field(default_factory=MomNextMeeting, alias="nextMeeting")

    model_config = {"populate_by_name": True}


class ProductSpec(BaseModel):
    """Product specification drafted from a meeting transcript."""

    product_overview: str = Field(default="", alias="productOverview")
    objectives: List[str] = Field(default_factory=list)
    key_features: List[str] = Field(default_factory=list, alias="keyFeatures")
    functional_requirements: List[str] = Field(default_factory=list, alias="functionalRequirements")
    non_functional_requirements: List[str] = Field(default_factory=list, alias="nonFunctionalRequirements")
    user_stories: List[str] = Field(default_factory=list, alias="userStories")
    constraints_risks: List[str] = Field(default_factory=list, alias="constraintsRisks")
    open_questions: List[str] = Field(default_factory=list, alias="openQuestions")
    ui_ux_requirements: List[str] = Field(default_factory=list, alias="uiUxRequirements")

    model_config = {"populate_by_name": True}
